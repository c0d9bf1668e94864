# coding=utf-8
from perf2profile.converter import ProfileConverter, ProfileDocument, convert, string_to_profiles
from perf2profile.errors import ConversionError, DecodeFailed, EncodeFailed, FormatUnrecognized, UsageError
from perf2profile.util.constant import DataFormat, GroupBy, SampleLabels

__version__ = "1.0.0"
