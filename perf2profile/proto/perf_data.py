# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: PerfDataProto, the serialized record stream of a perf.data capture.
FileName：perf_data.py
Create Date: 2026/10/19
Notes:
    field numbers follow quipper's perf_data.proto so its serialized files parse as-is,
    only the messages the converter reads are declared.
"""
from perf2profile.proto.schema import MessageRegistry, build_file, field, message

PACKAGE = "quipper"
_P = ".quipper.PerfDataProto."

_perf_event_attr = message("PerfEventAttr", [
    field("type", 1, "uint32"),
    field("size", 2, "uint32"),
    field("config", 3, "uint64"),
    field("sample_period", 4, "uint64"),
    field("sample_freq", 5, "uint64"),
    field("sample_type", 6, "uint64"),
    field("read_format", 7, "uint64"),
    field("disabled", 8, "bool"),
    field("inherit", 9, "bool"),
    field("pinned", 10, "bool"),
    field("exclusive", 11, "bool"),
    field("exclude_user", 12, "bool"),
    field("exclude_kernel", 13, "bool"),
    field("exclude_hv", 14, "bool"),
    field("exclude_idle", 15, "bool"),
    field("mmap", 16, "bool"),
    field("comm", 17, "bool"),
    field("freq", 18, "bool"),
    field("inherit_stat", 19, "bool"),
    field("enable_on_exec", 20, "bool"),
    field("task", 21, "bool"),
    field("watermark", 22, "bool"),
    field("precise_ip", 23, "uint32"),
    field("mmap_data", 24, "bool"),
    field("sample_id_all", 25, "bool"),
    field("exclude_host", 26, "bool"),
    field("exclude_guest", 27, "bool"),
    field("wakeup_events", 28, "uint32"),
    field("wakeup_watermark", 29, "uint32"),
    field("bp_type", 30, "uint32"),
    field("bp_addr", 31, "uint64"),
    field("config1", 32, "uint64"),
    field("bp_len", 33, "uint64"),
    field("config2", 34, "uint64"),
    field("branch_sample_type", 35, "uint64"),
])

_perf_file_attr = message("PerfFileAttr", [
    field("attr", 1, _P + "PerfEventAttr"),
    field("ids", 2, "uint64", repeated=True),
])

_perf_event_type = message("PerfEventType", [
    field("id", 1, "uint64"),
    field("name", 2, "string"),
    field("name_md5_prefix", 3, "uint64"),
])

_sample_info = message("SampleInfo", [
    field("pid", 1, "uint32"),
    field("tid", 2, "uint32"),
    field("sample_time_ns", 3, "uint64"),
    field("id", 4, "uint64"),
    field("cpu", 5, "uint32"),
    field("stream_id", 6, "uint64"),
])

_comm_event = message("CommEvent", [
    field("pid", 1, "uint32"),
    field("tid", 2, "uint32"),
    field("comm", 3, "string"),
    field("comm_md5_prefix", 4, "uint64"),
    field("sample_time", 5, "uint64"),
    field("sample_info", 6, _P + "SampleInfo"),
])

_mmap_event = message("MMapEvent", [
    field("pid", 1, "uint32"),
    field("tid", 2, "uint32"),
    field("start", 3, "uint64"),
    field("len", 4, "uint64"),
    field("pgoff", 5, "uint64"),
    field("filename", 6, "string"),
    field("filename_md5_prefix", 7, "uint64"),
    field("sample_info", 8, _P + "SampleInfo"),
    field("maj", 9, "uint32"),
    field("min", 10, "uint32"),
    field("ino", 11, "uint64"),
    field("ino_generation", 12, "uint64"),
    field("prot", 13, "uint32"),
    field("flags", 14, "uint32"),
    field("build_id", 15, "bytes"),
])

_fork_event = message("ForkEvent", [
    field("pid", 1, "uint32"),
    field("ppid", 2, "uint32"),
    field("tid", 3, "uint32"),
    field("ptid", 4, "uint32"),
    field("fork_time_ns", 5, "uint64"),
    field("sample_info", 11, _P + "SampleInfo"),
])

_lost_event = message("LostEvent", [
    field("id", 1, "uint64"),
    field("lost", 2, "uint64"),
    field("sample_info", 3, _P + "SampleInfo"),
])

_throttle_event = message("ThrottleEvent", [
    field("time_ns", 1, "uint64"),
    field("id", 2, "uint64"),
    field("stream_id", 3, "uint64"),
    field("sample_info", 4, _P + "SampleInfo"),
])

_branch_stack_entry = message("BranchStackEntry", [
    field("from_ip", 1, "uint64"),
    field("to_ip", 2, "uint64"),
    field("mispredicted", 3, "bool"),
])

_sample_event = message("SampleEvent", [
    field("ip", 1, "uint64"),
    field("pid", 2, "uint32"),
    field("tid", 3, "uint32"),
    field("sample_time_ns", 4, "uint64"),
    field("addr", 5, "uint64"),
    field("id", 6, "uint64"),
    field("stream_id", 7, "uint64"),
    field("period", 8, "uint64"),
    field("cpu", 9, "uint32"),
    field("raw_size", 10, "uint32"),
    field("callchain", 11, "uint64", repeated=True),
    field("branch_stack", 12, _P + "BranchStackEntry", repeated=True),
    field("weight", 15, "uint64"),
    field("data_src", 16, "uint64"),
    field("transaction", 17, "uint64"),
    field("physical_addr", 19, "uint64"),
    field("cgroup", 20, "uint64"),
    field("data_page_size", 21, "uint64"),
    field("code_page_size", 22, "uint64"),
])

_event_header = message("EventHeader", [
    field("type", 1, "uint32"),
    field("misc", 2, "uint32"),
    field("size", 3, "uint32"),
])

_perf_event = message("PerfEvent", [
    field("header", 1, _P + "EventHeader"),
    field("mmap_event", 2, _P + "MMapEvent"),
    field("sample_event", 3, _P + "SampleEvent"),
    field("comm_event", 4, _P + "CommEvent"),
    field("fork_event", 5, _P + "ForkEvent"),
    field("lost_event", 6, _P + "LostEvent"),
    field("throttle_event", 7, _P + "ThrottleEvent"),
    field("exit_event", 9, _P + "ForkEvent"),
    field("timestamp", 10, "uint64"),
])

_perf_build_id = message("PerfBuildID", [
    field("misc", 1, "uint32"),
    field("pid", 2, "uint32"),
    field("build_id_hash", 3, "bytes"),
    field("filename", 4, "string"),
    field("filename_md5_prefix", 5, "uint64"),
])

_string_metadata = message("StringMetadata", [
    field("hostname", 1, "string"),
    field("kernel_version", 2, "string"),
    field("perf_version", 3, "string"),
    field("architecture", 4, "string"),
])

_perf_data_proto = message("PerfDataProto", [
    field("file_attrs", 1, _P + "PerfFileAttr", repeated=True),
    field("events", 2, _P + "PerfEvent", repeated=True),
    field("timestamp_sec", 3, "uint64"),
    field("build_ids", 7, _P + "PerfBuildID", repeated=True),
    field("event_types", 10, _P + "PerfEventType", repeated=True),
    field("string_metadata", 13, _P + "StringMetadata"),
], nested=[
    _perf_event_attr, _perf_file_attr, _perf_event_type, _sample_info, _comm_event, _mmap_event,
    _fork_event, _lost_event, _throttle_event, _branch_stack_entry, _sample_event, _event_header,
    _perf_event, _perf_build_id, _string_metadata,
])

FILE_DESCRIPTOR = build_file("perf2profile/perf_data.proto", PACKAGE, "proto2", [_perf_data_proto])

registry = MessageRegistry(FILE_DESCRIPTOR)

PerfDataProto = registry.get("PerfDataProto")

# file_attrs and events; a record stream carries at least one of them
RECORD_FIELD_NUMBERS = (1, 2)
