# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: in-memory event stream produced by both decoders.
FileName：event_stream.py
Create Date: 2026/10/19
Notes:
    samples are resolved against the process address space as it was when the
    sample was taken, so mmap/comm/fork records are replayed in stream order.
"""
from collections import defaultdict, namedtuple
from typing import Dict, List, Optional

from perf2profile.errors import DecodeFailed
from perf2profile.util.constant import (AttrType, CONTEXT_EXECUTION_MODE, EXECUTION_MODE_NAMES,
                                        HARDWARE_EVENT_NAMES, KERNEL_MMAP_NAME, KERNEL_PID,
                                        PERF_CONTEXT_MAX, RecordMisc, SOFTWARE_EVENT_NAMES)
from perf2profile.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)

MappingInfo = namedtuple("MappingInfo", ["start", "limit", "file_offset", "filename", "build_id"])

Frame = namedtuple("Frame", ["address", "mapping"])


class EventType:
    def __init__(self, index: int, name: str, attr_type: int, config: int, ids: List[int]) -> None:
        self._index = index
        self._name = name
        self._attr_type = attr_type
        self._config = config
        self._ids = list(ids)

    @property
    def index(self) -> int:
        return self._index

    @property
    def name(self) -> str:
        return self._name

    @property
    def attr_type(self) -> int:
        return self._attr_type

    @property
    def config(self) -> int:
        return self._config

    @property
    def ids(self) -> List[int]:
        return self._ids

    def __eq__(self, other) -> bool:
        if isinstance(other, EventType):
            return (self._index, self._name, self._attr_type, self._config) == \
                (other._index, other._name, other._attr_type, other._config)
        return False

    def __repr__(self):
        return f"EventType(index={self._index}, name='{self._name}', type={self._attr_type}, config={self._config})"


class Sample:
    """One decoded sample; frames run leaf first."""
    __slots__ = ("event_index", "pid", "tid", "time_ns", "cpu", "period", "execution_mode",
                 "comm", "thread_comm", "frames")

    def __init__(self, event_index, pid, tid, time_ns=None, cpu=None, period=1,
                 execution_mode=RecordMisc.cpumode_unknown, comm=None, thread_comm=None, frames=()):
        self.event_index = event_index
        self.pid = pid
        self.tid = tid
        self.time_ns = time_ns
        self.cpu = cpu
        self.period = period
        self.execution_mode = execution_mode
        self.comm = comm
        self.thread_comm = thread_comm
        self.frames = tuple(frames)

    @property
    def execution_mode_name(self) -> str:
        return EXECUTION_MODE_NAMES.get(self.execution_mode, "unknown")

    def __repr__(self):
        return f"Sample(event_index={self.event_index}, pid={self.pid}, tid={self.tid}, " \
               f"period={self.period}, frames={len(self.frames)})"


class EventStream:
    def __init__(self, event_types: List[EventType], samples: List[Sample], metadata: Optional[Dict] = None):
        self._event_types = list(event_types)
        self._samples = list(samples)
        self._metadata = dict(metadata or {})

    @property
    def event_types(self) -> List[EventType]:
        return self._event_types

    @property
    def samples(self) -> List[Sample]:
        return self._samples

    @property
    def metadata(self) -> Dict:
        return self._metadata

    def __len__(self):
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    @classmethod
    def from_perf_data(cls, perf_data) -> "EventStream":
        return _StreamBuilder(perf_data).build()


def default_event_name(attr_type: int, config: int, index: int) -> str:
    if attr_type == AttrType.hardware and config in HARDWARE_EVENT_NAMES:
        return HARDWARE_EVENT_NAMES[config]
    if attr_type == AttrType.software and config in SOFTWARE_EVENT_NAMES:
        return SOFTWARE_EVENT_NAMES[config]
    return f"event-{index}"


class _StreamBuilder:
    def __init__(self, perf_data):
        self._perf_data = perf_data
        self._event_types = self._read_event_types()
        self._id_to_index = {}
        for event_type in self._event_types:
            for event_id in event_type.ids:
                self._id_to_index[event_id] = event_type.index
        self._build_ids = {build_id.filename: build_id.build_id_hash.hex()
                           for build_id in perf_data.build_ids if build_id.build_id_hash}
        self._mappings: Dict[int, List[MappingInfo]] = defaultdict(list)
        self._comms: Dict[int, str] = {}
        self._lost = 0

    def build(self) -> EventStream:
        samples = []
        for event in self._perf_data.events:
            if event.HasField("sample_event"):
                samples.append(self._on_sample(event))
            elif event.HasField("mmap_event"):
                self._on_mmap(event.mmap_event)
            elif event.HasField("comm_event"):
                self._on_comm(event)
            elif event.HasField("fork_event"):
                self._on_fork(event.fork_event)
            elif event.HasField("lost_event"):
                self._lost += event.lost_event.lost

        if self._lost:
            logger.warning(f"capture reports {self._lost} lost events, profile totals are lower bounds")
        logger.debug(f"decoded {len(samples)} samples of {len(self._event_types)} event types")
        return EventStream(self._event_types, samples, self._read_metadata())

    def _read_event_types(self) -> List[EventType]:
        names = [event_type.name for event_type in self._perf_data.event_types]
        event_types = []
        for index, file_attr in enumerate(self._perf_data.file_attrs):
            attr = file_attr.attr
            name = names[index] if index < len(names) and names[index] else \
                default_event_name(attr.type, attr.config, index)
            event_types.append(EventType(index, name, attr.type, attr.config, file_attr.ids))
        return event_types

    def _read_metadata(self) -> Dict:
        if not self._perf_data.HasField("string_metadata"):
            return {}
        metadata = self._perf_data.string_metadata
        return {name: getattr(metadata, name)
                for name in ("hostname", "kernel_version", "perf_version", "architecture")
                if getattr(metadata, name)}

    def _event_index(self, sample_event) -> int:
        if not self._event_types:
            raise DecodeFailed("sample record found but the capture declares no event attributes")
        if len(self._event_types) == 1:
            return 0
        if not sample_event.HasField("id"):
            raise DecodeFailed("sample record carries no event id in a capture with several event attributes")
        index = self._id_to_index.get(sample_event.id)
        if index is None:
            raise DecodeFailed(f"sample id {sample_event.id} matches no event attribute")
        return index

    def _period(self, sample_event, event_index: int) -> int:
        if sample_event.HasField("period"):
            return sample_event.period
        attr = self._perf_data.file_attrs[event_index].attr
        if not attr.freq and attr.sample_period:
            return attr.sample_period
        return 1

    def _on_sample(self, event) -> Sample:
        sample_event = event.sample_event
        event_index = self._event_index(sample_event)
        pid = sample_event.pid
        tid = sample_event.tid
        execution_mode = event.header.misc & RecordMisc.cpumode_mask
        return Sample(event_index=event_index,
                      pid=pid,
                      tid=tid,
                      time_ns=sample_event.sample_time_ns if sample_event.HasField("sample_time_ns") else None,
                      cpu=sample_event.cpu if sample_event.HasField("cpu") else None,
                      period=self._period(sample_event, event_index),
                      execution_mode=execution_mode or self._callchain_mode(sample_event),
                      comm=self._comms.get(pid),
                      thread_comm=self._comms.get(tid),
                      frames=self._frames(pid, sample_event))

    @staticmethod
    def _callchain_mode(sample_event) -> int:
        for address in sample_event.callchain:
            if address >= PERF_CONTEXT_MAX:
                return CONTEXT_EXECUTION_MODE.get(address, RecordMisc.cpumode_unknown)
        return RecordMisc.cpumode_unknown

    def _frames(self, pid: int, sample_event) -> List[Frame]:
        frames = []
        leaf = sample_event.ip if sample_event.HasField("ip") else None
        if leaf is not None:
            frames.append(self._resolve(pid, leaf))
        first_entry = True
        for address in sample_event.callchain:
            if address >= PERF_CONTEXT_MAX:
                continue
            if first_entry:
                first_entry = False
                # the callchain repeats the sampled ip as its first entry
                if address == leaf:
                    continue
            frames.append(self._resolve(pid, address))
        return frames

    def _resolve(self, pid: int, address: int) -> Frame:
        for mappings in (self._mappings.get(pid, ()), self._mappings.get(KERNEL_PID, ())):
            # later mmaps shadow earlier ones over the same range
            for mapping in reversed(mappings):
                if mapping.start <= address < mapping.limit:
                    return Frame(address, mapping)
        return Frame(address, None)

    def _on_mmap(self, mmap_event):
        filename = mmap_event.filename
        build_id = mmap_event.build_id.hex() if mmap_event.build_id else self._build_ids.get(filename, "")
        if filename.startswith(KERNEL_MMAP_NAME):
            filename = KERNEL_MMAP_NAME
        self._mappings[mmap_event.pid].append(MappingInfo(start=mmap_event.start,
                                                          limit=mmap_event.start + mmap_event.len,
                                                          file_offset=mmap_event.pgoff,
                                                          filename=filename,
                                                          build_id=build_id))

    def _on_comm(self, event):
        comm_event = event.comm_event
        self._comms[comm_event.tid] = comm_event.comm
        if event.header.misc & RecordMisc.comm_exec and comm_event.pid == comm_event.tid:
            # exec replaces the address space, the new image is mmapped right after
            self._mappings.pop(comm_event.pid, None)

    def _on_fork(self, fork_event):
        if fork_event.pid == fork_event.ppid or fork_event.ppid not in self._mappings:
            return
        self._mappings[fork_event.pid] = list(self._mappings[fork_event.ppid])
