# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: tell perf.data captures and serialized PerfDataProto streams apart by content.
FileName：sniffer.py
Create Date: 2026/10/19
Notes:
    perf.data carries a magic; PerfDataProto has none, so it is recognized by walking its
    top-level protobuf fields without materializing the message. Writers add top-level
    fields the converter never reads (stats, topology, tracing data ...), so any field
    number is walked and only the record fields are required.
"""
from perf2profile.errors import FormatUnrecognized
from perf2profile.proto.perf_data import RECORD_FIELD_NUMBERS
from perf2profile.util.constant import DataFormat, PERF_MAGIC, PERF_MAGIC_SWAPPED

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LENGTH_DELIMITED = 2
WIRE_FIXED32 = 5
MAX_FIELD_NUMBER = (1 << 29) - 1


def _read_varint(data, offset):
    result = 0
    shift = 0
    while offset < len(data) and shift < 64:
        byte = data[offset]
        offset += 1
        result |= (byte & 0x7f) << shift
        if not byte & 0x80:
            return result, offset
        shift += 7
    return None, offset


def looks_like_perf_data(data) -> bool:
    return bytes(data[:8]) in (PERF_MAGIC, PERF_MAGIC_SWAPPED)


def looks_like_perf_data_proto(data) -> bool:
    """True when the buffer is a well-formed field sequence ending exactly at the buffer end
    and holding at least one file_attrs or events field."""
    offset = 0
    record_fields = 0
    while offset < len(data):
        tag, offset = _read_varint(data, offset)
        if tag is None:
            return False
        number, wire_type = tag >> 3, tag & 0x7
        if not 0 < number <= MAX_FIELD_NUMBER:
            return False
        if wire_type == WIRE_VARINT:
            value, offset = _read_varint(data, offset)
            if value is None:
                return False
        elif wire_type == WIRE_LENGTH_DELIMITED:
            length, offset = _read_varint(data, offset)
            if length is None:
                return False
            offset += length
        elif wire_type == WIRE_FIXED64:
            offset += 8
        elif wire_type == WIRE_FIXED32:
            offset += 4
        else:
            # groups are not used by PerfDataProto
            return False
        if offset > len(data):
            return False
        if number in RECORD_FIELD_NUMBERS:
            record_fields += 1
    return record_fields > 0


def sniff_format(buffer) -> str:
    """Return the DataFormat of buffer, raise FormatUnrecognized when neither signature matches."""
    data = memoryview(buffer).cast("B")
    if looks_like_perf_data(data):
        return DataFormat.perf_data
    if looks_like_perf_data_proto(data):
        return DataFormat.perf_data_proto
    raise FormatUnrecognized(f"{len(data)} byte buffer is neither perf.data nor PerfDataProto")
