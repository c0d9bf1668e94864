# coding=utf-8
import pytest

from perf2profile.decoder.raw_decoder import raw_decode
from perf2profile.decoder.record_decoder import record_decode
from perf2profile.errors import DecodeFailed
from perf2profile.proto.perf_data import PerfDataProto


def _proto_with_samples(attr_count=1, sample_ids=(None,)):
    perf_data = PerfDataProto()
    for index in range(attr_count):
        file_attr = perf_data.file_attrs.add()
        file_attr.attr.type = 1
        file_attr.attr.config = index
        file_attr.attr.sample_period = 4000
        file_attr.ids.append(100 + index)
    for sample_id in sample_ids:
        event = perf_data.events.add()
        event.header.type = 9
        event.header.misc = 2
        event.sample_event.ip = 0x1234
        event.sample_event.pid = 42
        event.sample_event.tid = 43
        if sample_id is not None:
            event.sample_event.id = sample_id
    return perf_data


def test_record_decode_matches_raw_decode(perf_data_bytes, perf_data_proto_bytes):
    from_raw = raw_decode(perf_data_bytes)
    from_proto = record_decode(perf_data_proto_bytes)

    assert from_proto.event_types == from_raw.event_types
    assert [(s.pid, s.tid, s.period, s.frames) for s in from_proto] == \
        [(s.pid, s.tid, s.period, s.frames) for s in from_raw]


def test_period_falls_back_to_attr_sample_period():
    stream = record_decode(_proto_with_samples().SerializeToString())

    sample = stream.samples[0]
    assert sample.period == 4000
    assert sample.time_ns is None
    assert [frame.address for frame in sample.frames] == [0x1234]
    assert stream.event_types[0].name == "cpu-clock"


def test_sample_ids_select_event_type():
    stream = record_decode(_proto_with_samples(2, (101, 100)).SerializeToString())
    assert [sample.event_index for sample in stream] == [1, 0]


def test_missing_sample_id_with_several_attrs_fails():
    with pytest.raises(DecodeFailed):
        record_decode(_proto_with_samples(2, (None,)).SerializeToString())


def test_samples_without_attrs_fail():
    with pytest.raises(DecodeFailed):
        record_decode(_proto_with_samples(0, (None,)).SerializeToString())


def test_lost_events_do_not_fail():
    perf_data = _proto_with_samples()
    perf_data.events.add().lost_event.lost = 3
    assert len(record_decode(perf_data.SerializeToString())) == 1


def test_corrupt_proto_fails():
    with pytest.raises(DecodeFailed):
        record_decode(b"\x0a\x05\x01")
