# coding=utf-8
from perf2profile.decoder.event_stream import EventStream, EventType, Frame, MappingInfo, Sample
from perf2profile.decoder.raw_decoder import raw_decode
from perf2profile.decoder.record_decoder import record_decode
