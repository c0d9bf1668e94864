# coding=utf-8
"""
Helpers that assemble protobuf descriptors in code and turn them into message classes.

The message classes behave exactly like the ones protoc generates into *_pb2 modules
(ParseFromString, SerializeToString, json_format ...), they are only declared here
instead of in a .proto file.
"""
from typing import Dict, Iterable

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

FieldProto = descriptor_pb2.FieldDescriptorProto

SCALAR_TYPES = {
    "int32": FieldProto.TYPE_INT32,
    "int64": FieldProto.TYPE_INT64,
    "uint32": FieldProto.TYPE_UINT32,
    "uint64": FieldProto.TYPE_UINT64,
    "bool": FieldProto.TYPE_BOOL,
    "string": FieldProto.TYPE_STRING,
    "bytes": FieldProto.TYPE_BYTES,
}


def field(name: str, number: int, kind: str, repeated: bool = False) -> FieldProto:
    """kind is a scalar name from SCALAR_TYPES or a fully qualified '.package.Message'."""
    proto = FieldProto(name=name, number=number)
    proto.label = FieldProto.LABEL_REPEATED if repeated else FieldProto.LABEL_OPTIONAL
    if kind.startswith("."):
        proto.type = FieldProto.TYPE_MESSAGE
        proto.type_name = kind
    else:
        proto.type = SCALAR_TYPES[kind]
    return proto


def message(name: str, fields: Iterable[FieldProto], nested: Iterable[descriptor_pb2.DescriptorProto] = ()):
    proto = descriptor_pb2.DescriptorProto(name=name)
    proto.field.extend(fields)
    proto.nested_type.extend(nested)
    return proto


def build_file(name: str, package: str, syntax: str, messages) -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(name=name, package=package, syntax=syntax)
    proto.message_type.extend(messages)
    return proto


class MessageRegistry:
    """Holds the classes of one file descriptor, addressable by their dotted name inside the package."""

    def __init__(self, file_proto: descriptor_pb2.FileDescriptorProto):
        self._package = file_proto.package
        # private pool, so nothing clashes with protos other libraries register globally
        self._pool = descriptor_pool.DescriptorPool()
        self._pool.AddSerializedFile(file_proto.SerializeToString())
        self._classes: Dict[str, type] = {}

    def get(self, name: str) -> type:
        if name not in self._classes:
            descriptor = self._pool.FindMessageTypeByName(f"{self._package}.{name}")
            self._classes[name] = message_factory.GetMessageClass(descriptor)
        return self._classes[name]
