# coding=utf-8
"""
Copyright (c) Huawei Technologies Co., Ltd. 2020-2028. All rights reserved.
Description: exceptions raised by the conversion pipeline.
FileName：errors.py
Create Date: 2026/10/19
Notes:
    every failure is fatal for the buffer being converted, there is no partial result.
"""


class ConversionError(Exception):
    """Base class for every error the pipeline reports."""


class UsageError(ConversionError):
    """Malformed or missing command arguments."""


class FormatUnrecognized(ConversionError):
    """The buffer is neither a perf.data capture nor a PerfDataProto stream."""


class DecodeFailed(ConversionError):
    """A recognized encoding turned out to be structurally corrupt."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class EncodeFailed(ConversionError):
    """The profile encoder rejected an event group."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause
