# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: pprof Profile message (perftools.profiles, proto3).
FileName：profile.py
Create Date: 2026/10/19
Notes:
    wire compatible with github.com/google/pprof/proto/profile.proto.
"""
from perf2profile.proto.schema import MessageRegistry, build_file, field, message

PACKAGE = "perftools.profiles"
_P = ".perftools.profiles."

_value_type = message("ValueType", [
    field("type", 1, "int64"),
    field("unit", 2, "int64"),
])

_label = message("Label", [
    field("key", 1, "int64"),
    field("str", 2, "int64"),
    field("num", 3, "int64"),
    field("num_unit", 4, "int64"),
])

_sample = message("Sample", [
    field("location_id", 1, "uint64", repeated=True),
    field("value", 2, "int64", repeated=True),
    field("label", 3, _P + "Label", repeated=True),
])

_mapping = message("Mapping", [
    field("id", 1, "uint64"),
    field("memory_start", 2, "uint64"),
    field("memory_limit", 3, "uint64"),
    field("file_offset", 4, "uint64"),
    field("filename", 5, "int64"),
    field("build_id", 6, "int64"),
    field("has_functions", 7, "bool"),
    field("has_filenames", 8, "bool"),
    field("has_line_numbers", 9, "bool"),
    field("has_inline_frames", 10, "bool"),
])

_line = message("Line", [
    field("function_id", 1, "uint64"),
    field("line", 2, "int64"),
    field("column", 3, "int64"),
])

_location = message("Location", [
    field("id", 1, "uint64"),
    field("mapping_id", 2, "uint64"),
    field("address", 3, "uint64"),
    field("line", 4, _P + "Line", repeated=True),
    field("is_folded", 5, "bool"),
])

_function = message("Function", [
    field("id", 1, "uint64"),
    field("name", 2, "int64"),
    field("system_name", 3, "int64"),
    field("filename", 4, "int64"),
    field("start_line", 5, "int64"),
])

_profile = message("Profile", [
    field("sample_type", 1, _P + "ValueType", repeated=True),
    field("sample", 2, _P + "Sample", repeated=True),
    field("mapping", 3, _P + "Mapping", repeated=True),
    field("location", 4, _P + "Location", repeated=True),
    field("function", 5, _P + "Function", repeated=True),
    field("string_table", 6, "string", repeated=True),
    field("drop_frames", 7, "int64"),
    field("keep_frames", 8, "int64"),
    field("time_nanos", 9, "int64"),
    field("duration_nanos", 10, "int64"),
    field("period_type", 11, _P + "ValueType"),
    field("period", 12, "int64"),
    field("comment", 13, "int64", repeated=True),
    field("default_sample_type", 14, "int64"),
])

FILE_DESCRIPTOR = build_file("perf2profile/profile.proto", PACKAGE, "proto3",
                             [_value_type, _label, _sample, _mapping, _line, _location, _function, _profile])

registry = MessageRegistry(FILE_DESCRIPTOR)

Profile = registry.get("Profile")
