# coding=utf-8
import pytest

from perf2profile.decoder.raw_decoder import parse_perf_data
from perf2profile.proto.profile import Profile
from perf_data_builder import multi_event_single_process


@pytest.fixture
def perf_data_bytes():
    return multi_event_single_process().build()


@pytest.fixture
def perf_data_proto_bytes(perf_data_bytes):
    return parse_perf_data(perf_data_bytes).SerializeToString()


@pytest.fixture
def parse_profile():
    def parse(data: bytes):
        profile = Profile()
        profile.ParseFromString(data)
        return profile
    return parse

