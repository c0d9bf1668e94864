# coding=utf-8
from google.protobuf.message import DecodeError

from perf2profile.decoder.event_stream import EventStream
from perf2profile.errors import DecodeFailed
from perf2profile.proto.perf_data import PerfDataProto
from perf2profile.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)


def parse_perf_data_proto(buffer):
    perf_data = PerfDataProto()
    try:
        perf_data.ParseFromString(bytes(buffer))
    except DecodeError as err:
        raise DecodeFailed(f"PerfDataProto is corrupt: {err}", cause=err) from err
    logger.debug(f"parsed PerfDataProto with {len(perf_data.file_attrs)} attrs, "
                 f"{len(perf_data.events)} events")
    return perf_data


def record_decode(buffer) -> EventStream:
    """Decode a serialized PerfDataProto into the event stream."""
    return EventStream.from_perf_data(parse_perf_data_proto(buffer))
