# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: sniff -> decode -> partition -> encode, for one in-memory capture.
FileName：converter.py
Create Date: 2026/10/19
Notes:
    a conversion either yields every profile document or raises, never a partial list.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List

from perf2profile.decoder.event_stream import EventStream
from perf2profile.decoder.raw_decoder import raw_decode
from perf2profile.decoder.record_decoder import record_decode
from perf2profile.encoder.profile_encoder import encode_profile
from perf2profile.errors import DecodeFailed
from perf2profile.partition import EventGroup, partition
from perf2profile.sniffer import sniff_format
from perf2profile.util.constant import DataFormat, GroupBy, SampleLabels
from perf2profile.util.logging_utils import get_default_logger
from perf2profile.util.utils import cal_time

logger = get_default_logger(__name__)

DECODERS = {
    DataFormat.perf_data: raw_decode,
    DataFormat.perf_data_proto: record_decode,
}


class ProfileDocument:
    """One serialized pprof Profile and the group it was built from."""

    def __init__(self, key, name: str, data: bytes, sample_count: int) -> None:
        self._key = key
        self._name = name
        self._data = bytes(data)
        self._sample_count = sample_count

    @property
    def key(self):
        return self._key

    @property
    def name(self) -> str:
        return self._name

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def sample_count(self) -> int:
        return self._sample_count

    def __eq__(self, other) -> bool:
        if isinstance(other, ProfileDocument):
            return (self._key, self._name, self._data) == (other._key, other._name, other._data)
        return False

    def __repr__(self):
        return f"ProfileDocument(name='{self._name}', samples={self._sample_count}, bytes={len(self._data)})"


class ProfileConverter:
    def __init__(self, group_by: str = GroupBy.pid, sample_labels: Iterable[str] = (), max_workers: int = 1):
        if group_by not in GroupBy.values():
            raise ValueError(f"group_by must be one of {GroupBy.values()}, but got {group_by!r}")
        unknown = [label for label in sample_labels if label not in SampleLabels.values()]
        if unknown:
            raise ValueError(f"unknown sample labels {unknown}")
        self._group_by = group_by
        self._sample_labels = tuple(sample_labels)
        self._max_workers = max(1, max_workers)

    @cal_time(logger)
    def convert(self, buffer) -> List[ProfileDocument]:
        data_format = sniff_format(buffer)
        logger.info(f"input recognized as {data_format}, {len(buffer)} bytes")

        stream = self._decode(data_format, buffer)
        groups = partition(stream, self._group_by)
        documents = self._encode(stream, groups)

        logger.info(f"converted {len(stream)} samples of {len(stream.event_types)} event types "
                    f"into {len(documents)} profiles")
        return documents

    @staticmethod
    def _decode(data_format: str, buffer) -> EventStream:
        try:
            return DECODERS[data_format](buffer)
        except DecodeFailed:
            raise
        except (ValueError, IndexError, UnicodeDecodeError) as err:
            raise DecodeFailed(f"{data_format} input is malformed: {err}", cause=err) from err

    def _encode(self, stream: EventStream, groups: List[EventGroup]) -> List[ProfileDocument]:
        def encode(group):
            data = encode_profile(group, stream, self._sample_labels)
            return ProfileDocument(group.key, group.name(stream), data, len(group))

        if self._max_workers == 1 or len(groups) <= 1:
            return [encode(group) for group in groups]
        # groups are disjoint and the encoder keeps no state, map keeps group order
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            return list(executor.map(encode, groups))


def convert(buffer, group_by: str = GroupBy.pid, sample_labels: Iterable[str] = (),
            max_workers: int = 1) -> List[ProfileDocument]:
    return ProfileConverter(group_by, sample_labels, max_workers).convert(buffer)


def string_to_profiles(buffer, group_by: str = GroupBy.pid) -> List[bytes]:
    """Serialized profiles of buffer, one per process by default."""
    return [document.data for document in convert(buffer, group_by=group_by)]
