# -*- coding: utf-8 -*-
# source: speedtest_prom/remote.proto
"""
Protocol buffer classes for remote.proto.

Laid out like protoc output, but the file descriptor is assembled from
descriptor_pb2 messages instead of an embedded serialized blob. Keep the
two in sync when remote.proto changes.
"""
from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

_sym_db = _symbol_database.Default()

_F = _descriptor_pb2.FieldDescriptorProto


def _field(name, number, field_type, label=_F.LABEL_OPTIONAL, type_name=None):
  field = _F(name=name, number=number, type=field_type, label=label, json_name=name)
  if type_name:
    field.type_name = '.prometheus.' + type_name
  return field


def _message(name, fields):
  message = _descriptor_pb2.DescriptorProto(name=name)
  message.field.extend(fields)
  return message


_FILE = _descriptor_pb2.FileDescriptorProto(
    name='speedtest_prom/remote.proto',
    package='prometheus',
    syntax='proto3',
    message_type=[
        _message('WriteRequest', [
            _field('timeseries', 1, _F.TYPE_MESSAGE, _F.LABEL_REPEATED, 'TimeSeries'),
        ]),
        _message('TimeSeries', [
            _field('labels', 1, _F.TYPE_MESSAGE, _F.LABEL_REPEATED, 'Label'),
            _field('samples', 2, _F.TYPE_MESSAGE, _F.LABEL_REPEATED, 'Sample'),
        ]),
        _message('Label', [
            _field('name', 1, _F.TYPE_STRING),
            _field('value', 2, _F.TYPE_STRING),
        ]),
        _message('Sample', [
            _field('value', 1, _F.TYPE_DOUBLE),
            _field('timestamp', 2, _F.TYPE_INT64),
        ]),
    ],
)

DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_FILE.SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, 'speedtest_prom.remote_pb2', _globals)
