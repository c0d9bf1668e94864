# coding=utf-8
import struct

import pytest

from perf2profile.decoder.raw_decoder import parse_perf_data, raw_decode
from perf2profile.errors import DecodeFailed
from perf2profile.util.constant import KERNEL_MMAP_NAME, RecordMisc
from perf_data_builder import (CONTEXT_USER, KERNEL_PID, MISC_COMM_EXEC, PerfDataBuilder,
                               multi_event_single_process)


@pytest.mark.parametrize("little", [True, False])
def test_decode_both_byte_orders(little):
    stream = raw_decode(multi_event_single_process(little=little).build())

    assert [event_type.name for event_type in stream.event_types] == ["cycles", "instructions"]
    assert [event_type.ids for event_type in stream.event_types] == [[101], [202]]
    assert len(stream) == 3
    assert [sample.event_index for sample in stream] == [0, 1, 0]
    assert [sample.period for sample in stream] == [10, 20, 10]
    assert [sample.time_ns for sample in stream] == [1000, 2000, 3000]
    assert [sample.cpu for sample in stream] == [0, 0, 1]


def test_decode_resolves_frames_against_mappings(perf_data_bytes):
    first, _, kernel_sample = raw_decode(perf_data_bytes).samples

    assert [frame.address for frame in first.frames] == [0x400100, 0x400200]
    assert {frame.mapping.filename for frame in first.frames} == {"/usr/bin/app"}
    assert first.comm == "app"
    assert first.execution_mode == RecordMisc.user

    assert [frame.address for frame in kernel_sample.frames] == [0xffffffff81000010, 0x400300]
    assert kernel_sample.frames[0].mapping.filename == KERNEL_MMAP_NAME
    assert kernel_sample.frames[1].mapping.filename == "/usr/bin/app"
    assert kernel_sample.execution_mode_name == "kernel"


def test_decode_pipe_mode_uses_default_event_names():
    stream = raw_decode(multi_event_single_process().build_pipe())

    assert [event_type.name for event_type in stream.event_types] == ["cycles", "instructions"]
    assert len(stream) == 3


@pytest.mark.parametrize("little", [True, False])
def test_decode_sample_id_all_trailers(little):
    data = multi_event_single_process(little=little, sample_id_all=True).build()
    perf_data = parse_perf_data(data)
    stream = raw_decode(data)

    assert all(file_attr.attr.sample_id_all for file_attr in perf_data.file_attrs)
    assert perf_data.events[1].mmap_event.sample_info.pid == 1000
    assert perf_data.events[2].mmap_event.sample_info.pid == KERNEL_PID

    assert len(stream) == 3
    assert stream.samples[0].frames[0].mapping.filename == "/usr/bin/app"


def test_decode_reads_hostname_feature():
    builder = multi_event_single_process()
    builder.hostname("perf-host")
    stream = raw_decode(builder.build())

    assert stream.metadata == {"hostname": "perf-host"}
    assert [event_type.name for event_type in stream.event_types] == ["cycles", "instructions"]


def test_replayed_proto_keeps_records(perf_data_bytes):
    perf_data = parse_perf_data(perf_data_bytes)

    assert len(perf_data.file_attrs) == 2
    assert [event_type.name for event_type in perf_data.event_types] == ["cycles", "instructions"]
    # comm, two mmaps, three samples; FINISHED_ROUND carries nothing
    assert len(perf_data.events) == 6
    assert perf_data.events[0].comm_event.comm == "app"
    assert perf_data.events[2].mmap_event.pid == KERNEL_PID


def test_fork_inherits_parent_mappings():
    builder = PerfDataBuilder()
    builder.add_attr(1, 0, [7])
    builder.mmap(10, 0x1000, 0x1000, "/bin/parent")
    builder.fork(11, 10, time=5)
    builder.sample(7, 0x1800, 11, time=6)
    stream = raw_decode(builder.build())

    assert stream.event_types[0].name == "cpu-clock"
    assert stream.samples[0].frames[0].mapping.filename == "/bin/parent"


def test_exec_drops_previous_mappings():
    builder = PerfDataBuilder()
    builder.add_attr(1, 0, [7])
    builder.mmap(10, 0x1000, 0x1000, "/bin/sh")
    builder.comm(10, "app", misc=MISC_COMM_EXEC)
    builder.sample(7, 0x1800, 10, callchain=[CONTEXT_USER, 0x1800])
    sample = raw_decode(builder.build()).samples[0]

    assert sample.frames[0].mapping is None
    assert sample.comm == "app"


def test_single_attribute_needs_no_sample_id():
    builder = PerfDataBuilder()
    builder.add_attr(0, 0, [])
    builder.sample(999, 0x10, 1)
    assert raw_decode(builder.build()).samples[0].event_index == 0


def test_unknown_sample_id_fails():
    builder = multi_event_single_process()
    builder.sample(303, 0x400100, 1000)
    with pytest.raises(DecodeFailed):
        raw_decode(builder.build())


def test_truncated_data_section_fails(perf_data_bytes):
    with pytest.raises(DecodeFailed):
        raw_decode(perf_data_bytes[:len(perf_data_bytes) // 2])


def test_invalid_record_size_fails(perf_data_bytes):
    data_offset, = struct.unpack_from("<Q", perf_data_bytes, 40)
    corrupted = bytearray(perf_data_bytes)
    struct.pack_into("<H", corrupted, data_offset + 6, 4)
    with pytest.raises(DecodeFailed):
        raw_decode(bytes(corrupted))


def test_bad_magic_fails():
    with pytest.raises(DecodeFailed):
        parse_perf_data(b"NOTPERF!" + b"\0" * 96)


@pytest.mark.parametrize("little", [True, False])
def test_attr_flag_bits_follow_writer_byte_order(little):
    builder = PerfDataBuilder(little=little)
    builder.add_attr(0, 0, [1], sample_period=4000, freq=True)
    builder.add_attr(0, 1, [2], sample_period=250000)
    first, second = parse_perf_data(builder.build()).file_attrs

    assert first.attr.freq
    assert first.attr.sample_freq == 4000
    assert not first.attr.sample_id_all
    assert not second.attr.freq
    assert second.attr.sample_period == 250000
