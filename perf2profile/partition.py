# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: split an event stream into the groups that become profile documents.
FileName：partition.py
Create Date: 2026/10/19
Notes:
    groups come out in the order their key is first seen in the stream, and keep
    the stream order of their samples.
"""
from collections import defaultdict
from typing import List

from perf2profile.decoder.event_stream import EventStream, Sample
from perf2profile.util.constant import GroupBy
from perf2profile.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)


class EventGroup:
    def __init__(self, group_by: str, key, samples: List[Sample], event_indices: List[int]) -> None:
        self._group_by = group_by
        self._key = key
        self._samples = samples
        self._event_indices = list(event_indices)

    @property
    def group_by(self) -> str:
        return self._group_by

    @property
    def key(self):
        return self._key

    @property
    def samples(self) -> List[Sample]:
        return self._samples

    @property
    def event_indices(self) -> List[int]:
        """event types whose sample types the profile of this group carries"""
        return self._event_indices

    def name(self, stream: EventStream) -> str:
        if self._group_by == GroupBy.pid:
            return f"pid-{self._key}"
        if self._group_by == GroupBy.event:
            return stream.event_types[self._key].name
        return "all"

    def __len__(self):
        return len(self._samples)

    def __repr__(self):
        return f"EventGroup(group_by={self._group_by}, key={self._key}, samples={len(self._samples)})"


def _group_key(group_by: str):
    if group_by == GroupBy.pid:
        return lambda sample: sample.pid
    if group_by == GroupBy.event:
        return lambda sample: sample.event_index
    if group_by == GroupBy.none:
        return lambda sample: None
    raise ValueError(f"group_by must be one of {GroupBy.values()}, but got {group_by!r}")


def partition(stream: EventStream, group_by: str = GroupBy.pid) -> List[EventGroup]:
    key_of = _group_key(group_by)
    grouped = defaultdict(list)
    for sample in stream.samples:
        grouped[key_of(sample)].append(sample)

    all_events = [event_type.index for event_type in stream.event_types]
    groups = []
    for key, samples in grouped.items():
        event_indices = [key] if group_by == GroupBy.event else all_events
        groups.append(EventGroup(group_by, key, samples, event_indices))

    logger.debug(f"partitioned {len(stream)} samples into {len(groups)} groups by {group_by}")
    return groups
