# coding=utf-8
import pytest

from perf2profile.decoder.event_stream import EventStream, EventType, Frame, MappingInfo, Sample
from perf2profile.encoder.profile_encoder import encode_profile
from perf2profile.errors import EncodeFailed
from perf2profile.partition import partition
from perf2profile.util.constant import GroupBy, RecordMisc, SampleLabels
from perf_data_builder import sample_type_names


APP = MappingInfo(start=0x400000, limit=0x401000, file_offset=0, filename="/usr/bin/app", build_id="abcd")


def _stream(*samples):
    return EventStream([EventType(0, "cycles", 0, 0, [1]), EventType(1, "instructions", 0, 1, [2])],
                       list(samples))


def _encode(stream, sample_labels=(), group_by=GroupBy.none):
    return [encode_profile(group, stream, sample_labels) for group in partition(stream, group_by)]


def test_sample_types_and_aggregation(parse_profile):
    frames = (Frame(0x400100, APP), Frame(0x400200, APP))
    stream = _stream(Sample(0, 1, 1, time_ns=100, period=10, frames=frames),
                     Sample(1, 1, 1, time_ns=300, period=20, frames=frames),
                     Sample(0, 1, 1, time_ns=200, period=5, frames=frames[1:]))
    profile = parse_profile(_encode(stream)[0])

    assert sample_type_names(profile) == ["cycles_sample", "cycles_event",
                                          "instructions_sample", "instructions_event"]
    assert all(profile.string_table[sample_type.unit] == "count" for sample_type in profile.sample_type)
    assert profile.string_table[profile.default_sample_type] == "cycles_event"
    assert profile.string_table[0] == ""
    assert [list(sample.value) for sample in profile.sample] == [[1, 10, 1, 20], [1, 5, 0, 0]]
    assert [list(sample.location_id) for sample in profile.sample] == [[1, 2], [2]]
    assert profile.time_nanos == 100
    assert profile.duration_nanos == 200


def test_mappings_and_locations(parse_profile):
    stream = _stream(Sample(0, 1, 1, frames=(Frame(0x400100, APP), Frame(0x7000, None))))
    profile = parse_profile(_encode(stream)[0])

    assert len(profile.mapping) == 1
    mapping = profile.mapping[0]
    assert (mapping.id, mapping.memory_start, mapping.memory_limit) == (1, 0x400000, 0x401000)
    assert profile.string_table[mapping.filename] == "/usr/bin/app"
    assert profile.string_table[mapping.build_id] == "abcd"
    assert [(location.id, location.mapping_id, location.address) for location in profile.location] == \
        [(1, 1, 0x400100), (2, 0, 0x7000)]


def test_event_group_carries_only_its_event(parse_profile):
    stream = _stream(Sample(0, 1, 1, period=3), Sample(1, 1, 1, period=4))
    cycles, instructions = [parse_profile(data) for data in _encode(stream, group_by=GroupBy.event)]

    assert sample_type_names(cycles) == ["cycles_sample", "cycles_event"]
    assert sample_type_names(instructions) == ["instructions_sample", "instructions_event"]
    assert list(instructions.sample[0].value) == [1, 4]


def test_labels_split_aggregation(parse_profile):
    stream = _stream(Sample(0, 7, 8, cpu=0, execution_mode=RecordMisc.user, comm="app"),
                     Sample(0, 7, 9, cpu=0, execution_mode=RecordMisc.kernel, comm="app"))
    labels = [SampleLabels.comm, SampleLabels.tid, SampleLabels.execution_mode]
    profile = parse_profile(_encode(stream, labels)[0])

    assert len(profile.sample) == 2
    decoded = []
    for sample in profile.sample:
        decoded.append({profile.string_table[label.key]: profile.string_table[label.str] if label.str else label.num
                        for label in sample.label})
    assert decoded == [{"tid": 8, "comm": "app", "execution_mode": "user"},
                       {"tid": 9, "comm": "app", "execution_mode": "kernel"}]


def test_missing_label_values_are_omitted(parse_profile):
    profile = parse_profile(_encode(_stream(Sample(0, 1, 1)), [SampleLabels.cpu, SampleLabels.comm])[0])
    assert len(profile.sample[0].label) == 0
    assert profile.time_nanos == 0


def test_period_beyond_int64_fails():
    stream = _stream(Sample(0, 1, 1, period=2 ** 64 - 1))
    with pytest.raises(EncodeFailed):
        _encode(stream)


def test_capture_metadata_becomes_comments(parse_profile):
    stream = EventStream([EventType(0, "cycles", 0, 0, [1])], [Sample(0, 1, 1)],
                         metadata={"hostname": "perf-host", "kernel_version": "6.1.0"})
    profile = parse_profile(_encode(stream)[0])

    assert [profile.string_table[index] for index in profile.comment] == \
        ["hostname: perf-host", "kernel_version: 6.1.0"]
