# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: decoder for the native perf.data capture format.
FileName：raw_decoder.py
Create Date: 2026/10/19
Notes:
    layouts follow tools/perf/Documentation/perf.data-file-format.txt and
    include/uapi/linux/perf_event.h. The capture is described with construct
    and replayed into a PerfDataProto, which the shared event stream builder consumes.
"""
from typing import Dict, List, Optional

from construct import (Aligned, Array, Bytes, ConstructError, FixedSized, GreedyBytes, If, Int16ub, Int16ul,
                       Int32sb, Int32sl, Int32ub, Int32ul, Int64ub, Int64ul, NullTerminated, Prefixed,
                       PrefixedArray, Struct, Tell, this)

from perf2profile.decoder.event_stream import EventStream
from perf2profile.errors import DecodeFailed
from perf2profile.proto.perf_data import PerfDataProto
from perf2profile.util.constant import (AttrFlag, BRANCH_SAMPLE_HW_INDEX, HeaderFeature, PERF_ATTR_SIZE_VER0,
                                        PERF_ATTR_SIZE_VER1, PERF_ATTR_SIZE_VER2, PERF_ATTR_SIZE_VER3,
                                        PERF_ATTR_SIZE_VER4, PERF_MAGIC, PERF_MAGIC_SWAPPED, PIPE_HEADER_SIZE,
                                        ReadFormat, RecordMisc, RecordType, SampleType)
from perf2profile.util.logging_utils import get_default_logger
from perf2profile.util.utils import cal_time

logger = get_default_logger(__name__)

EVENT_HEADER_SIZE = 8
FILE_SECTION_SIZE = 16
# name records of in-band attributes in pipe mode
RECORD_EVENT_UPDATE = 78
EVENT_UPDATE_NAME = 1
BUILD_ID_SIZE = 20
RECORD_MISC_BUILD_ID_SIZE = 1 << 15


def _popcount(value: int) -> int:
    return bin(value).count("1")


def _c_string(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", "replace")


def _reverse_bits64(value: int) -> int:
    return int(format(value, "064b")[::-1], 2)


class _Formats:
    """construct layouts of one byte order."""

    def __init__(self, little: bool):
        u16 = Int16ul if little else Int16ub
        u32 = Int32ul if little else Int32ub
        s32 = Int32sl if little else Int32sb
        u64 = Int64ul if little else Int64ub
        self.u32 = u32
        self.u64 = u64

        self.file_section = Struct(
            "offset" / u64,
            "size" / u64,
        )
        self.pipe_header = Struct(
            "magic" / Bytes(8),
            "size" / u64,
        )
        self.file_header = Struct(
            "magic" / Bytes(8),
            "size" / u64,
            "attr_size" / u64,
            "attrs" / self.file_section,
            "data" / self.file_section,
            "event_types" / self.file_section,
            "adds_features" / Array(4, u64),
        )
        self.event_header = Struct(
            "type" / u32,
            "misc" / u16,
            "size" / u16,
        )
        # only the fields the converter reads, FixedSized skips newer ABI tails
        self.event_attr = Struct(
            "type" / u32,
            "size" / u32,
            "config" / u64,
            "sample_period" / u64,
            "sample_type" / u64,
            "read_format" / u64,
            "flags" / u64,
            "wakeup_events" / u32,
            "bp_type" / u32,
            "config1" / u64,
            "config2" / If(this.size >= PERF_ATTR_SIZE_VER1, u64),
            "branch_sample_type" / If(this.size >= PERF_ATTR_SIZE_VER2, u64),
            "sample_regs_user" / If(this.size >= PERF_ATTR_SIZE_VER3, u64),
            "sample_stack_user" / If(this.size >= PERF_ATTR_SIZE_VER3, u32),
            "clockid" / If(this.size >= PERF_ATTR_SIZE_VER3, s32),
            "sample_regs_intr" / If(this.size >= PERF_ATTR_SIZE_VER4, u64),
        )
        self.header_string = Struct(
            "len" / u32,
            "value" / Bytes(this.len),
        )
        self.event_desc = Struct(
            "nr" / u32,
            "attr_size" / u32,
            "events" / Array(this.nr, Struct(
                "attr" / FixedSized(this._.attr_size, self.event_attr),
                "nr_ids" / u32,
                "name" / self.header_string,
                "ids" / Array(this.nr_ids, u64),
            )),
        )
        self.trace_event_type = Struct(
            "event_id" / u64,
            "name" / Bytes(64),
        )
        self.build_id_body = Struct(
            "pid" / s32,
            "build_id" / Bytes(24),
            "filename" / GreedyBytes,
        )
        self.event_update_name = Struct(
            "type" / u64,
            "id" / u64,
            "name" / GreedyBytes,
        )

        filename = Aligned(8, NullTerminated(GreedyBytes))
        self.mmap_body = Struct(
            "pid" / u32,
            "tid" / u32,
            "addr" / u64,
            "len" / u64,
            "pgoff" / u64,
            "filename" / filename,
            "end" / Tell,
        )
        self.mmap2_body = Struct(
            "pid" / u32,
            "tid" / u32,
            "addr" / u64,
            "len" / u64,
            "pgoff" / u64,
            "file_id" / Bytes(24),
            "prot" / u32,
            "flags" / u32,
            "filename" / filename,
            "end" / Tell,
        )
        self.mmap2_inode = Struct(
            "maj" / u32,
            "min" / u32,
            "ino" / u64,
            "ino_generation" / u64,
        )
        self.comm_body = Struct(
            "pid" / u32,
            "tid" / u32,
            "comm" / filename,
            "end" / Tell,
        )
        self.fork_body = Struct(
            "pid" / u32,
            "ppid" / u32,
            "tid" / u32,
            "ptid" / u32,
            "time" / u64,
            "end" / Tell,
        )
        self.lost_body = Struct(
            "id" / u64,
            "lost" / u64,
            "end" / Tell,
        )
        self.throttle_body = Struct(
            "time" / u64,
            "id" / u64,
            "stream_id" / u64,
            "end" / Tell,
        )

    def sample_id_trailer(self, sample_type: int) -> Struct:
        u32, u64 = self.u32, self.u64
        fields = []
        if sample_type & SampleType.tid:
            fields += ["pid" / u32, "tid" / u32]
        if sample_type & SampleType.time:
            fields.append("time" / u64)
        if sample_type & SampleType.id:
            fields.append("id" / u64)
        if sample_type & SampleType.stream_id:
            fields.append("stream_id" / u64)
        if sample_type & SampleType.cpu:
            fields += ["cpu" / u32, "res" / u32]
        if sample_type & SampleType.identifier:
            fields.append("identifier" / u64)
        return Struct(*fields)

    def read_values(self, read_format: int) -> Struct:
        u64 = self.u64
        value_fields = ["value" / u64]
        if not read_format & ReadFormat.group:
            if read_format & ReadFormat.total_time_enabled:
                value_fields.append("time_enabled" / u64)
            if read_format & ReadFormat.total_time_running:
                value_fields.append("time_running" / u64)
        if read_format & ReadFormat.id:
            value_fields.append("id" / u64)
        if read_format & ReadFormat.lost:
            value_fields.append("lost" / u64)
        if not read_format & ReadFormat.group:
            return Struct(*value_fields)

        group_fields = ["nr" / u64]
        if read_format & ReadFormat.total_time_enabled:
            group_fields.append("time_enabled" / u64)
        if read_format & ReadFormat.total_time_running:
            group_fields.append("time_running" / u64)
        group_fields.append("counters" / Array(this.nr, Struct(*value_fields)))
        return Struct(*group_fields)

    def sample_body(self, attr) -> Struct:
        """Layout of PERF_RECORD_SAMPLE for one event attribute."""
        u32, u64 = self.u32, self.u64
        sample_type = attr.sample_type
        fields = []
        if sample_type & SampleType.identifier:
            fields.append("identifier" / u64)
        if sample_type & SampleType.ip:
            fields.append("ip" / u64)
        if sample_type & SampleType.tid:
            fields += ["pid" / u32, "tid" / u32]
        if sample_type & SampleType.time:
            fields.append("time" / u64)
        if sample_type & SampleType.addr:
            fields.append("addr" / u64)
        if sample_type & SampleType.id:
            fields.append("id" / u64)
        if sample_type & SampleType.stream_id:
            fields.append("stream_id" / u64)
        if sample_type & SampleType.cpu:
            fields += ["cpu" / u32, "res" / u32]
        if sample_type & SampleType.period:
            fields.append("period" / u64)
        if sample_type & SampleType.read:
            fields.append("read" / self.read_values(attr.read_format))
        if sample_type & SampleType.callchain:
            fields.append("callchain" / PrefixedArray(u64, u64))
        if sample_type & SampleType.raw:
            fields.append("raw" / Prefixed(u32, GreedyBytes))
        if sample_type & SampleType.branch_stack:
            hw_index = bool((attr.branch_sample_type or 0) & BRANCH_SAMPLE_HW_INDEX)
            fields.append("branch_stack" / Struct(
                "nr" / u64,
                "hw_idx" / If(hw_index, u64),
                "entries" / Array(this.nr, Struct("from_ip" / u64, "to_ip" / u64, "flags" / u64)),
            ))
        if sample_type & SampleType.regs_user:
            fields.append("regs_user" / Struct(
                "abi" / u64,
                "regs" / If(this.abi != 0, Array(_popcount(attr.sample_regs_user or 0), u64)),
            ))
        if sample_type & SampleType.stack_user:
            fields.append("stack_user" / Struct(
                "size" / u64,
                "data" / Bytes(this.size),
                "dyn_size" / If(this.size != 0, u64),
            ))
        if sample_type & (SampleType.weight | SampleType.weight_struct):
            fields.append("weight" / u64)
        if sample_type & SampleType.data_src:
            fields.append("data_src" / u64)
        if sample_type & SampleType.transaction:
            fields.append("transaction" / u64)
        if sample_type & SampleType.regs_intr:
            fields.append("regs_intr" / Struct(
                "abi" / u64,
                "regs" / If(this.abi != 0, Array(_popcount(attr.sample_regs_intr or 0), u64)),
            ))
        if sample_type & SampleType.phys_addr:
            fields.append("phys_addr" / u64)
        if sample_type & SampleType.cgroup:
            fields.append("cgroup" / u64)
        if sample_type & SampleType.data_page_size:
            fields.append("data_page_size" / u64)
        if sample_type & SampleType.code_page_size:
            fields.append("code_page_size" / u64)
        if sample_type & SampleType.aux:
            fields.append("aux" / Struct(
                "size" / u64,
                "data" / Bytes(this.size),
            ))
        return Struct(*fields)


FORMATS = {
    True: _Formats(little=True),
    False: _Formats(little=False),
}


class RawPerfDataDecoder:
    """Replays one perf.data buffer into a PerfDataProto."""

    def __init__(self, buffer):
        self._data = bytes(buffer)
        magic = self._data[:8]
        if magic == PERF_MAGIC:
            self._fmt = FORMATS[True]
            self._little = True
        elif magic == PERF_MAGIC_SWAPPED:
            self._fmt = FORMATS[False]
            self._little = False
        else:
            raise DecodeFailed(f"bad perf.data magic {magic!r}")
        self._perf_data = PerfDataProto()
        self._attrs = []
        self._sample_formats: List[Struct] = []
        self._trailer: Optional[Struct] = None
        self._id_to_attr: Dict[int, int] = {}
        self._uniform_layout = True
        self._names: Dict[int, str] = {}

    def decode(self):
        try:
            self._decode()
        except ConstructError as err:
            raise DecodeFailed(f"perf.data is truncated or corrupt: {err}", cause=err) from err
        return self._perf_data

    def _decode(self):
        header = self._fmt.pipe_header.parse(self._data)
        if header.size == PIPE_HEADER_SIZE:
            logger.debug("perf.data written in pipe mode")
            self._read_records(PIPE_HEADER_SIZE, len(self._data))
        else:
            header = self._fmt.file_header.parse(self._data)
            self._read_attrs(header)
            self._read_legacy_event_types(header.event_types)
            self._read_features(header)
            self._check_section(header.data, "data")
            self._read_records(header.data.offset, header.data.offset + header.data.size)
        self._fill_event_types()

    def _check_section(self, section, name):
        if section.offset + section.size > len(self._data):
            raise DecodeFailed(f"{name} section [{section.offset}, +{section.size}) "
                               f"overruns the {len(self._data)} byte buffer")

    def _section_bytes(self, section, name):
        self._check_section(section, name)
        return self._data[section.offset:section.offset + section.size]

    def _read_attrs(self, header):
        if not header.attrs.size:
            return
        if header.attr_size <= FILE_SECTION_SIZE:
            raise DecodeFailed(f"invalid attr_size {header.attr_size}")
        attrs = self._section_bytes(header.attrs, "attrs")
        entry = Struct(
            "attr" / FixedSized(header.attr_size - FILE_SECTION_SIZE, self._fmt.event_attr),
            "ids" / self._fmt.file_section,
        )
        for index in range(len(attrs) // header.attr_size):
            parsed = entry.parse(attrs[index * header.attr_size:(index + 1) * header.attr_size])
            ids_bytes = self._section_bytes(parsed.ids, "attr ids")
            ids = Array(len(ids_bytes) // 8, self._fmt.u64).parse(ids_bytes)
            self._add_attr(parsed.attr, ids)

    def _read_legacy_event_types(self, section):
        if not section.size:
            return
        data = self._section_bytes(section, "event_types")
        entries = Array(len(data) // self._fmt.trace_event_type.sizeof(), self._fmt.trace_event_type).parse(data)
        by_config = {entry.event_id: _c_string(entry.name) for entry in entries}
        for index, attr in enumerate(self._attrs):
            if attr.config in by_config:
                self._names.setdefault(index, by_config[attr.config])

    def _add_attr(self, attr, ids):
        if not self._little:
            # big-endian writers pack the attr bitfield from the most significant bit
            attr.flags = _reverse_bits64(attr.flags)
        index = len(self._attrs)
        self._attrs.append(attr)
        self._sample_formats.append(self._fmt.sample_body(attr))
        if self._trailer is None and attr.flags & AttrFlag.sample_id_all:
            self._trailer = self._fmt.sample_id_trailer(attr.sample_type)
        for event_id in ids:
            self._id_to_attr[event_id] = index
        self._uniform_layout = len({(a.sample_type, a.read_format, a.sample_regs_user, a.sample_regs_intr,
                                     a.branch_sample_type) for a in self._attrs}) == 1

        file_attr = self._perf_data.file_attrs.add()
        file_attr.ids.extend(ids)
        proto_attr = file_attr.attr
        proto_attr.type = attr.type
        proto_attr.size = attr.size
        proto_attr.config = attr.config
        proto_attr.sample_type = attr.sample_type
        proto_attr.read_format = attr.read_format
        flags = attr.flags
        proto_attr.disabled = bool(flags & 1)
        proto_attr.inherit = bool(flags & (1 << 1))
        proto_attr.exclude_user = bool(flags & (1 << 4))
        proto_attr.exclude_kernel = bool(flags & (1 << 5))
        proto_attr.mmap = bool(flags & (1 << 8))
        proto_attr.comm = bool(flags & (1 << 9))
        proto_attr.freq = bool(flags & AttrFlag.freq)
        proto_attr.precise_ip = (flags >> 15) & 0x3
        proto_attr.sample_id_all = bool(flags & AttrFlag.sample_id_all)
        if proto_attr.freq:
            proto_attr.sample_freq = attr.sample_period
        else:
            proto_attr.sample_period = attr.sample_period
        proto_attr.wakeup_events = attr.wakeup_events
        proto_attr.bp_type = attr.bp_type
        proto_attr.config1 = attr.config1
        if attr.config2 is not None:
            proto_attr.config2 = attr.config2
        if attr.branch_sample_type is not None:
            proto_attr.branch_sample_type = attr.branch_sample_type

    def _read_features(self, header):
        table = header.data.offset + header.data.size
        position = 0
        for bit in range(1, HeaderFeature.last_feature):
            if not header.adds_features[bit // 64] >> (bit % 64) & 1:
                continue
            start = table + position * FILE_SECTION_SIZE
            position += 1
            if start + FILE_SECTION_SIZE > len(self._data):
                raise DecodeFailed(f"feature table entry for feature {bit} lies outside the buffer")
            section = self._fmt.file_section.parse(self._data[start:start + FILE_SECTION_SIZE])
            data = self._section_bytes(section, f"feature {bit}")
            if bit == HeaderFeature.event_desc:
                self._read_event_desc(data)
            elif bit == HeaderFeature.build_id:
                self._read_build_ids(data)
            elif bit in (HeaderFeature.hostname, HeaderFeature.osrelease,
                         HeaderFeature.version, HeaderFeature.arch):
                self._read_string_feature(bit, data)

    def _read_event_desc(self, data):
        desc = self._fmt.event_desc.parse(data)
        for position, event in enumerate(desc.events):
            name = _c_string(event.name.value)
            index = next((self._id_to_attr[event_id] for event_id in event.ids if event_id in self._id_to_attr),
                         position)
            if index < len(self._attrs):
                self._names[index] = name

    def _read_build_ids(self, data):
        offset = 0
        while offset + EVENT_HEADER_SIZE <= len(data):
            header = self._fmt.event_header.parse(data[offset:offset + EVENT_HEADER_SIZE])
            if header.size < EVENT_HEADER_SIZE or offset + header.size > len(data):
                raise DecodeFailed(f"build id record at {offset} has invalid size {header.size}")
            self._add_build_id(header, data[offset + EVENT_HEADER_SIZE:offset + header.size])
            offset += header.size

    def _add_build_id(self, header, body):
        parsed = self._fmt.build_id_body.parse(body)
        if header.misc & RECORD_MISC_BUILD_ID_SIZE:
            build_id = parsed.build_id[:parsed.build_id[BUILD_ID_SIZE]]
        else:
            build_id = parsed.build_id[:BUILD_ID_SIZE]
        entry = self._perf_data.build_ids.add()
        entry.misc = header.misc
        entry.pid = parsed.pid & 0xffffffff
        entry.build_id_hash = build_id
        entry.filename = _c_string(parsed.filename)

    def _read_string_feature(self, bit, data):
        value = _c_string(self._fmt.header_string.parse(data).value)
        metadata = self._perf_data.string_metadata
        if bit == HeaderFeature.hostname:
            metadata.hostname = value
        elif bit == HeaderFeature.osrelease:
            metadata.kernel_version = value
        elif bit == HeaderFeature.version:
            metadata.perf_version = value
        else:
            metadata.architecture = value

    def _fill_event_types(self):
        for index, attr in enumerate(self._attrs):
            event_type = self._perf_data.event_types.add()
            event_type.id = attr.config
            if index in self._names:
                event_type.name = self._names[index]

    def _read_records(self, offset, end):
        count = 0
        while offset < end:
            if end - offset < EVENT_HEADER_SIZE:
                raise DecodeFailed(f"truncated record header at offset {offset}")
            header = self._fmt.event_header.parse(self._data[offset:offset + EVENT_HEADER_SIZE])
            if header.size < EVENT_HEADER_SIZE or offset + header.size > end:
                raise DecodeFailed(f"record of type {header.type} at offset {offset} "
                                   f"has invalid size {header.size}")
            self._read_record(header, self._data[offset + EVENT_HEADER_SIZE:offset + header.size])
            offset += header.size
            count += 1
        logger.debug(f"read {count} perf records")

    def _read_record(self, header, body):
        if header.type == RecordType.header_attr:
            self._read_header_attr(body)
            return
        if header.type == RecordType.header_event_type:
            entry = self._fmt.trace_event_type.parse(body)
            for index, attr in enumerate(self._attrs):
                if attr.config == entry.event_id:
                    self._names.setdefault(index, _c_string(entry.name))
            return
        if header.type == RecordType.header_build_id:
            self._add_build_id(header, body)
            return
        if header.type == RECORD_EVENT_UPDATE:
            self._read_event_update(body)
            return

        handler = {
            RecordType.sample: self._read_sample,
            RecordType.mmap: self._read_mmap,
            RecordType.mmap2: self._read_mmap2,
            RecordType.comm: self._read_comm,
            RecordType.fork: self._read_fork,
            RecordType.exit: self._read_fork,
            RecordType.lost: self._read_lost,
            RecordType.throttle: self._read_throttle,
            RecordType.unthrottle: self._read_throttle,
        }.get(header.type)
        if handler is None:
            # FINISHED_ROUND, ID_INDEX, AUXTRACE_INFO, TIME_CONV ... carry nothing we convert
            return
        event = self._perf_data.events.add()
        event.header.type = header.type
        event.header.misc = header.misc
        event.header.size = header.size
        handler(event, header, body)

    def _read_header_attr(self, body):
        attr_size = self._fmt.u32.parse(body[4:8]) or PERF_ATTR_SIZE_VER0
        if attr_size > len(body):
            raise DecodeFailed(f"in-band attr of size {attr_size} overruns its {len(body)} byte record")
        attr = FixedSized(attr_size, self._fmt.event_attr).parse(body)
        ids = Array((len(body) - attr_size) // 8, self._fmt.u64).parse(body[attr_size:])
        self._add_attr(attr, ids)

    def _read_event_update(self, body):
        update = self._fmt.event_update_name.parse(body)
        if update.type != EVENT_UPDATE_NAME or update.id not in self._id_to_attr:
            return
        self._names[self._id_to_attr[update.id]] = _c_string(update.name)

    def _read_trailer(self, sample_info, body, end):
        if self._trailer is None or end >= len(body):
            return
        trailer = self._trailer.parse(body[end:])
        if "pid" in trailer:
            sample_info.pid = trailer.pid
            sample_info.tid = trailer.tid
        if "time" in trailer:
            sample_info.sample_time_ns = trailer.time
        if "id" in trailer:
            sample_info.id = trailer.id
        if "identifier" in trailer:
            sample_info.id = trailer.identifier
        if "stream_id" in trailer:
            sample_info.stream_id = trailer.stream_id
        if "cpu" in trailer:
            sample_info.cpu = trailer.cpu

    def _sample_format(self, body) -> Struct:
        if not self._sample_formats:
            raise DecodeFailed("sample record found before any event attribute")
        if self._uniform_layout:
            return self._sample_formats[0]
        if not all(attr.sample_type & SampleType.identifier for attr in self._attrs):
            raise DecodeFailed("event attributes use different sample layouts without PERF_SAMPLE_IDENTIFIER")
        event_id = self._fmt.u64.parse(body[:8])
        if event_id not in self._id_to_attr:
            raise DecodeFailed(f"sample id {event_id} matches no event attribute")
        return self._sample_formats[self._id_to_attr[event_id]]

    def _read_sample(self, event, header, body):
        parsed = self._sample_format(body).parse(body)
        sample = event.sample_event
        if "ip" in parsed:
            sample.ip = parsed.ip
        if "pid" in parsed:
            sample.pid = parsed.pid
            sample.tid = parsed.tid
        if "time" in parsed:
            sample.sample_time_ns = parsed.time
            event.timestamp = parsed.time
        if "addr" in parsed:
            sample.addr = parsed.addr
        if "id" in parsed:
            sample.id = parsed.id
        if "identifier" in parsed:
            sample.id = parsed.identifier
        if "stream_id" in parsed:
            sample.stream_id = parsed.stream_id
        if "cpu" in parsed:
            sample.cpu = parsed.cpu
        if "period" in parsed:
            sample.period = parsed.period
        if "callchain" in parsed:
            sample.callchain.extend(parsed.callchain)
        if "raw" in parsed:
            sample.raw_size = len(parsed.raw)
        if "branch_stack" in parsed:
            for entry in parsed.branch_stack.entries:
                branch = sample.branch_stack.add()
                branch.from_ip = entry.from_ip
                branch.to_ip = entry.to_ip
                branch.mispredicted = bool(entry.flags & 1)
        if "weight" in parsed:
            sample.weight = parsed.weight
        if "data_src" in parsed:
            sample.data_src = parsed.data_src
        if "transaction" in parsed:
            sample.transaction = parsed.transaction
        if "phys_addr" in parsed:
            sample.physical_addr = parsed.phys_addr
        if "cgroup" in parsed:
            sample.cgroup = parsed.cgroup
        if "data_page_size" in parsed:
            sample.data_page_size = parsed.data_page_size
        if "code_page_size" in parsed:
            sample.code_page_size = parsed.code_page_size

    def _read_mmap(self, event, header, body):
        parsed = self._fmt.mmap_body.parse(body)
        mmap = event.mmap_event
        mmap.pid = parsed.pid
        mmap.tid = parsed.tid
        mmap.start = parsed.addr
        mmap.len = parsed.len
        mmap.pgoff = parsed.pgoff
        mmap.filename = parsed.filename.decode("utf-8", "replace")
        self._read_trailer(mmap.sample_info, body, parsed.end)

    def _read_mmap2(self, event, header, body):
        parsed = self._fmt.mmap2_body.parse(body)
        mmap = event.mmap_event
        mmap.pid = parsed.pid
        mmap.tid = parsed.tid
        mmap.start = parsed.addr
        mmap.len = parsed.len
        mmap.pgoff = parsed.pgoff
        mmap.filename = parsed.filename.decode("utf-8", "replace")
        mmap.prot = parsed.prot
        mmap.flags = parsed.flags
        if header.misc & RecordMisc.mmap_build_id:
            size = min(parsed.file_id[0], BUILD_ID_SIZE)
            mmap.build_id = parsed.file_id[4:4 + size]
        else:
            inode = self._fmt.mmap2_inode.parse(parsed.file_id)
            mmap.maj = inode.maj
            mmap.min = inode.min
            mmap.ino = inode.ino
            mmap.ino_generation = inode.ino_generation
        self._read_trailer(mmap.sample_info, body, parsed.end)

    def _read_comm(self, event, header, body):
        parsed = self._fmt.comm_body.parse(body)
        comm = event.comm_event
        comm.pid = parsed.pid
        comm.tid = parsed.tid
        comm.comm = parsed.comm.decode("utf-8", "replace")
        self._read_trailer(comm.sample_info, body, parsed.end)

    def _read_fork(self, event, header, body):
        parsed = self._fmt.fork_body.parse(body)
        fork = event.fork_event if header.type == RecordType.fork else event.exit_event
        fork.pid = parsed.pid
        fork.ppid = parsed.ppid
        fork.tid = parsed.tid
        fork.ptid = parsed.ptid
        fork.fork_time_ns = parsed.time
        self._read_trailer(fork.sample_info, body, parsed.end)

    def _read_lost(self, event, header, body):
        parsed = self._fmt.lost_body.parse(body)
        event.lost_event.id = parsed.id
        event.lost_event.lost = parsed.lost
        self._read_trailer(event.lost_event.sample_info, body, parsed.end)

    def _read_throttle(self, event, header, body):
        parsed = self._fmt.throttle_body.parse(body)
        throttle = event.throttle_event
        throttle.time_ns = parsed.time
        throttle.id = parsed.id
        throttle.stream_id = parsed.stream_id
        self._read_trailer(throttle.sample_info, body, parsed.end)


def parse_perf_data(buffer):
    return RawPerfDataDecoder(buffer).decode()


@cal_time(logger)
def raw_decode(buffer) -> EventStream:
    """Decode a native perf.data capture into the event stream."""
    return EventStream.from_perf_data(parse_perf_data(buffer))
