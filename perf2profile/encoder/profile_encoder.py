# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: encode one event group as a pprof Profile.
FileName：profile_encoder.py
Create Date: 2026/10/19
Notes:
    every carried event type contributes two sample types, <event>_sample (how many
    samples) and <event>_event (sum of their periods). Locations are raw addresses,
    symbolization is left to pprof. Capture metadata goes into the
    profile comments.
"""
from typing import Dict, Iterable, List, Tuple

from google.protobuf.message import EncodeError

from perf2profile.decoder.event_stream import EventStream, MappingInfo, Sample
from perf2profile.errors import EncodeFailed
from perf2profile.partition import EventGroup
from perf2profile.proto.profile import Profile
from perf2profile.util.constant import INT64_MAX, SampleLabels
from perf2profile.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)

NUMERIC_LABELS = (SampleLabels.pid, SampleLabels.tid, SampleLabels.timestamp_ns, SampleLabels.cpu)


def _check_int64(value: int, what: str) -> int:
    if not 0 <= value <= INT64_MAX:
        raise EncodeFailed(f"{what} {value} does not fit the int64 profile field")
    return value


class ProfileBuilder:
    def __init__(self, stream: EventStream, group: EventGroup, sample_labels: Iterable[str] = ()):
        self._stream = stream
        self._group = group
        self._sample_labels = [label for label in SampleLabels.values() if label in set(sample_labels)]
        self._profile = Profile()
        self._strings: Dict[str, int] = {}
        self._mapping_ids: Dict[MappingInfo, int] = {}
        self._location_ids: Dict[Tuple[int, int], int] = {}
        # position of each carried event type's sample/event columns
        self._columns = {event_index: 2 * position for position, event_index in enumerate(group.event_indices)}
        self._string("")

    def build(self):
        self._add_sample_types()
        aggregated: Dict[Tuple, List[int]] = {}
        for sample in self._group.samples:
            key = (self._locations(sample), self._labels(sample))
            values = aggregated.get(key)
            if values is None:
                values = aggregated[key] = [0] * (2 * len(self._columns))
            column = self._columns[sample.event_index]
            values[column] += 1
            values[column + 1] += sample.period

        for (location_ids, labels), values in aggregated.items():
            proto_sample = self._profile.sample.add()
            proto_sample.location_id.extend(location_ids)
            proto_sample.value.extend(_check_int64(value, "sample value") for value in values)
            for key, is_string, value in labels:
                label = proto_sample.label.add()
                label.key = key
                if is_string:
                    label.str = value
                else:
                    label.num = _check_int64(value, "label value")
        self._set_time_range()
        self._add_comments()
        return self._profile

    def _string(self, value: str) -> int:
        index = self._strings.get(value)
        if index is None:
            index = self._strings[value] = len(self._profile.string_table)
            self._profile.string_table.append(value)
        return index

    def _add_sample_types(self):
        count = self._string("count")
        for position, event_index in enumerate(self._group.event_indices):
            name = self._stream.event_types[event_index].name
            sample_type = self._profile.sample_type.add()
            sample_type.type = self._string(f"{name}_sample")
            sample_type.unit = count
            event_type = self._profile.sample_type.add()
            event_type.type = self._string(f"{name}_event")
            event_type.unit = count
            if position == 0:
                self._profile.default_sample_type = event_type.type

    def _mapping_id(self, mapping: MappingInfo) -> int:
        if mapping is None:
            return 0
        mapping_id = self._mapping_ids.get(mapping)
        if mapping_id is None:
            mapping_id = self._mapping_ids[mapping] = len(self._mapping_ids) + 1
            proto_mapping = self._profile.mapping.add()
            proto_mapping.id = mapping_id
            proto_mapping.memory_start = mapping.start
            proto_mapping.memory_limit = mapping.limit
            proto_mapping.file_offset = mapping.file_offset
            proto_mapping.filename = self._string(mapping.filename)
            if mapping.build_id:
                proto_mapping.build_id = self._string(mapping.build_id)
        return mapping_id

    def _locations(self, sample: Sample) -> Tuple[int, ...]:
        location_ids = []
        for frame in sample.frames:
            key = (self._mapping_id(frame.mapping), frame.address)
            location_id = self._location_ids.get(key)
            if location_id is None:
                location_id = self._location_ids[key] = len(self._location_ids) + 1
                location = self._profile.location.add()
                location.id = location_id
                location.mapping_id = key[0]
                location.address = frame.address
            location_ids.append(location_id)
        return tuple(location_ids)

    def _labels(self, sample: Sample) -> Tuple:
        labels = []
        for name in self._sample_labels:
            if name in NUMERIC_LABELS:
                value = getattr(sample, name if name != SampleLabels.timestamp_ns else "time_ns")
                if value is not None:
                    labels.append((self._string(name), False, value))
                continue
            if name == SampleLabels.execution_mode:
                value = sample.execution_mode_name
            else:
                value = getattr(sample, name)
            if value is not None:
                labels.append((self._string(name), True, self._string(value)))
        return tuple(labels)

    def _add_comments(self):
        # capture metadata such as hostname and kernel_version, shown by pprof -comments
        for name, value in self._stream.metadata.items():
            self._profile.comment.append(self._string(f"{name}: {value}"))

    def _set_time_range(self):
        times = [sample.time_ns for sample in self._group.samples if sample.time_ns is not None]
        if not times:
            return
        self._profile.time_nanos = _check_int64(min(times), "sample time")
        self._profile.duration_nanos = max(times) - min(times)


def encode_profile(group: EventGroup, stream: EventStream, sample_labels: Iterable[str] = ()) -> bytes:
    """Serialize group as a pprof Profile, raise EncodeFailed when the profile cannot represent it."""
    try:
        profile = ProfileBuilder(stream, group, sample_labels).build()
        data = profile.SerializeToString()
    except (EncodeError, ValueError, TypeError) as err:
        raise EncodeFailed(f"cannot encode group {group.key!r}: {err}", cause=err) from err
    logger.debug(f"encoded group {group.key!r}: {len(profile.sample)} samples, "
                 f"{len(profile.location)} locations, {len(data)} bytes")
    return data
