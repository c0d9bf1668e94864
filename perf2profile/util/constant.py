# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: perf ABI constants shared by the decoders and the encoder.
FileName：constant.py
Create Date: 2026/10/19
Notes:
    values follow linux/include/uapi/linux/perf_event.h and tools/perf/util/header.h
"""
import os

CONVERT_CONFIG_PATH = os.getenv("PERF2PROFILE_CONFIG", "/etc/perf2profile/convert_config.json")

PERF_MAGIC = b"PERFILE2"
PERF_MAGIC_SWAPPED = b"2ELIFREP"
PIPE_HEADER_SIZE = 16

UINT32_MAX = 0xffffffff
UINT64_MAX = 0xffffffffffffffff
INT64_MAX = 0x7fffffffffffffff

KERNEL_PID = UINT32_MAX
KERNEL_MMAP_NAME = "[kernel.kallsyms]"


class DataFormat:
    perf_data = "perf.data"
    perf_data_proto = "PerfDataProto"


class GroupBy:
    none = "none"
    pid = "pid"
    event = "event"

    @classmethod
    def values(cls):
        return [cls.none, cls.pid, cls.event]


class SampleLabels:
    pid = "pid"
    tid = "tid"
    timestamp_ns = "timestamp_ns"
    cpu = "cpu"
    comm = "comm"
    thread_comm = "thread_comm"
    execution_mode = "execution_mode"

    @classmethod
    def values(cls):
        return [cls.pid, cls.tid, cls.timestamp_ns, cls.cpu, cls.comm, cls.thread_comm, cls.execution_mode]


class RecordType:
    mmap = 1
    lost = 2
    comm = 3
    exit = 4
    throttle = 5
    unthrottle = 6
    fork = 7
    read = 8
    sample = 9
    mmap2 = 10

    # synthesized by perf itself, never by the kernel
    header_attr = 64
    header_event_type = 65
    header_tracing_data = 66
    header_build_id = 67
    finished_round = 68


class RecordMisc:
    cpumode_mask = 0x7
    cpumode_unknown = 0
    kernel = 1
    user = 2
    hypervisor = 3
    guest_kernel = 4
    guest_user = 5
    mmap_build_id = 1 << 14
    comm_exec = 1 << 13


EXECUTION_MODE_NAMES = {
    RecordMisc.kernel: "kernel",
    RecordMisc.user: "user",
    RecordMisc.hypervisor: "hypervisor",
    RecordMisc.guest_kernel: "guest_kernel",
    RecordMisc.guest_user: "guest_user",
}


class SampleType:
    ip = 1 << 0
    tid = 1 << 1
    time = 1 << 2
    addr = 1 << 3
    read = 1 << 4
    callchain = 1 << 5
    id = 1 << 6
    cpu = 1 << 7
    period = 1 << 8
    stream_id = 1 << 9
    raw = 1 << 10
    branch_stack = 1 << 11
    regs_user = 1 << 12
    stack_user = 1 << 13
    weight = 1 << 14
    data_src = 1 << 15
    identifier = 1 << 16
    transaction = 1 << 17
    regs_intr = 1 << 18
    phys_addr = 1 << 19
    aux = 1 << 20
    cgroup = 1 << 21
    data_page_size = 1 << 22
    code_page_size = 1 << 23
    weight_struct = 1 << 24


class ReadFormat:
    total_time_enabled = 1 << 0
    total_time_running = 1 << 1
    id = 1 << 2
    group = 1 << 3
    lost = 1 << 4


class AttrFlag:
    freq = 1 << 10
    sample_id_all = 1 << 18


BRANCH_SAMPLE_HW_INDEX = 1 << 17

# perf_event_attr sizes per ABI revision
PERF_ATTR_SIZE_VER0 = 64
PERF_ATTR_SIZE_VER1 = 72
PERF_ATTR_SIZE_VER2 = 80
PERF_ATTR_SIZE_VER3 = 96
PERF_ATTR_SIZE_VER4 = 104

# callchain context markers, everything at or above this is not an address
PERF_CONTEXT_MAX = UINT64_MAX - 4095 + 1
PERF_CONTEXT_HV = UINT64_MAX - 32 + 1
PERF_CONTEXT_KERNEL = UINT64_MAX - 128 + 1
PERF_CONTEXT_USER = UINT64_MAX - 512 + 1
PERF_CONTEXT_GUEST_KERNEL = UINT64_MAX - 2176 + 1
PERF_CONTEXT_GUEST_USER = UINT64_MAX - 2560 + 1

CONTEXT_EXECUTION_MODE = {
    PERF_CONTEXT_HV: RecordMisc.hypervisor,
    PERF_CONTEXT_KERNEL: RecordMisc.kernel,
    PERF_CONTEXT_USER: RecordMisc.user,
    PERF_CONTEXT_GUEST_KERNEL: RecordMisc.guest_kernel,
    PERF_CONTEXT_GUEST_USER: RecordMisc.guest_user,
}


class HeaderFeature:
    tracing_data = 1
    build_id = 2
    hostname = 3
    osrelease = 4
    version = 5
    arch = 6
    nrcpus = 7
    cpudesc = 8
    cpuid = 9
    total_mem = 10
    cmdline = 11
    event_desc = 12
    last_feature = 256


class AttrType:
    hardware = 0
    software = 1
    tracepoint = 2
    hw_cache = 3
    raw = 4
    breakpoint = 5


HARDWARE_EVENT_NAMES = {
    0: "cycles",
    1: "instructions",
    2: "cache-references",
    3: "cache-misses",
    4: "branch-instructions",
    5: "branch-misses",
    6: "bus-cycles",
    7: "stalled-cycles-frontend",
    8: "stalled-cycles-backend",
    9: "ref-cycles",
}

SOFTWARE_EVENT_NAMES = {
    0: "cpu-clock",
    1: "task-clock",
    2: "page-faults",
    3: "context-switches",
    4: "cpu-migrations",
    5: "minor-faults",
    6: "major-faults",
    7: "alignment-faults",
    8: "emulation-faults",
    9: "dummy",
    10: "bpf-output",
    11: "cgroup-switches",
}
