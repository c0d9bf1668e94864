# coding=utf-8
import pytest

from perf2profile import (DecodeFailed, EncodeFailed, FormatUnrecognized, GroupBy, ProfileConverter,
                          SampleLabels, convert, string_to_profiles)
from perf2profile.proto.perf_data import PerfDataProto
from perf_data_builder import PerfDataBuilder, multi_event_single_process, sample_type_names


def test_multi_event_single_process_yields_one_profile(perf_data_bytes, parse_profile):
    profiles = string_to_profiles(perf_data_bytes)

    assert len(profiles) == 1
    profile = parse_profile(profiles[0])
    assert sample_type_names(profile) == ["cycles_sample", "cycles_event",
                                          "instructions_sample", "instructions_event"]
    assert [list(sample.value) for sample in profile.sample] == [[1, 10, 1, 20], [1, 10, 0, 0]]
    assert len(profile.location) == 4
    assert [profile.string_table[mapping.filename] for mapping in profile.mapping] == \
        ["/usr/bin/app", "[kernel.kallsyms]"]
    assert profile.time_nanos == 1000
    assert profile.duration_nanos == 2000


@pytest.mark.parametrize("capture", ["perf_data_bytes", "perf_data_proto_bytes"])
def test_single_process_gives_one_profile_for_both_formats(request, capture):
    assert len(string_to_profiles(request.getfixturevalue(capture))) == 1


def test_both_encodings_convert_identically(perf_data_bytes, perf_data_proto_bytes):
    assert string_to_profiles(perf_data_proto_bytes) == string_to_profiles(perf_data_bytes)


def test_conversion_is_deterministic(perf_data_bytes):
    assert string_to_profiles(perf_data_bytes) == string_to_profiles(perf_data_bytes)


@pytest.mark.parametrize("capture", ["perf_data_bytes", "perf_data_proto_bytes"])
def test_group_by_event(request, capture):
    documents = convert(request.getfixturevalue(capture), group_by=GroupBy.event)

    assert [document.name for document in documents] == ["cycles", "instructions"]
    assert [document.sample_count for document in documents] == [2, 1]


def test_group_by_pid_splits_processes(parse_profile):
    builder = PerfDataBuilder()
    builder.add_attr(0, 0, [1], name="cycles")
    for pid in (30, 40, 30):
        builder.sample(1, 0x10, pid)
    documents = convert(builder.build())

    assert [document.name for document in documents] == ["pid-30", "pid-40"]
    assert [document.key for document in documents] == [30, 40]
    assert list(parse_profile(documents[0].data).sample[0].value) == [2, 2]


def test_worker_pool_keeps_group_order(perf_data_bytes):
    serial = convert(perf_data_bytes, group_by=GroupBy.event)
    pooled = convert(perf_data_bytes, group_by=GroupBy.event, max_workers=4)
    assert pooled == serial


def test_no_samples_yields_no_profiles():
    builder = PerfDataBuilder()
    builder.add_attr(0, 0, [1], name="cycles")
    builder.comm(1, "init")
    assert string_to_profiles(builder.build()) == []


def test_corrupt_header_is_unrecognized(perf_data_bytes):
    with pytest.raises(FormatUnrecognized):
        string_to_profiles(b"XXXXXXXX" + perf_data_bytes[8:])


def test_unknown_sample_id_fails():
    builder = multi_event_single_process()
    builder.sample(404, 0x400100, 1000)
    with pytest.raises(DecodeFailed):
        string_to_profiles(builder.build())


def test_oversized_period_fails():
    builder = PerfDataBuilder()
    builder.add_attr(0, 0, [1], name="cycles")
    builder.sample(1, 0x10, 1, period=2 ** 64 - 1)
    with pytest.raises(EncodeFailed):
        string_to_profiles(builder.build())


def test_sample_labels_are_emitted(perf_data_bytes, parse_profile):
    document, = ProfileConverter(GroupBy.none, [SampleLabels.pid]).convert(perf_data_bytes)
    profile = parse_profile(document.data)

    assert document.name == "all"
    assert {label.num for sample in profile.sample for label in sample.label} == {1000}


@pytest.mark.parametrize("kwargs", [
    {"group_by": "thread"},
    {"sample_labels": ["flavour"]},
])
def test_invalid_converter_arguments(kwargs):
    with pytest.raises(ValueError):
        ProfileConverter(**kwargs)


def test_extra_writer_fields_do_not_change_the_result(perf_data_proto_bytes):
    extended = perf_data_proto_bytes + b"\x22\x02\x08\x03" + b"\x28\x96\x01"
    assert string_to_profiles(extended) == string_to_profiles(perf_data_proto_bytes)


def test_group_by_event_on_three_event_proto():
    perf_data = PerfDataProto()
    for index, name in enumerate(["cycles", "instructions", "cache-misses"]):
        file_attr = perf_data.file_attrs.add()
        file_attr.attr.type = 0
        file_attr.attr.config = index
        file_attr.ids.append(10 + index)
        event_type = perf_data.event_types.add()
        event_type.id = index
        event_type.name = name
    for sample_id in (12, 10, 11, 12):
        event = perf_data.events.add()
        event.header.type = 9
        event.header.misc = 2
        event.sample_event.id = sample_id
        event.sample_event.ip = 0x1000
        event.sample_event.pid = 5
        event.sample_event.tid = 5
        event.sample_event.period = 100
    documents = convert(perf_data.SerializeToString(), group_by=GroupBy.event)

    assert [document.name for document in documents] == ["cache-misses", "cycles", "instructions"]
    assert [document.sample_count for document in documents] == [2, 1, 1]
    assert len(convert(perf_data.SerializeToString(), group_by=GroupBy.pid)) == 1


def test_hostname_reaches_profile_comments(parse_profile):
    builder = multi_event_single_process()
    builder.hostname("perf-host")
    profile = parse_profile(string_to_profiles(builder.build())[0])

    assert [profile.string_table[index] for index in profile.comment] == ["hostname: perf-host"]
