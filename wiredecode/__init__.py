"""Schema-less decoder for the protobuf-style tag/length wire format."""

from __future__ import annotations

from .config import DEFAULT_CONFIG, DecoderConfig
from .inspect_proto import describe_message
from .message import FieldSink, RawMessage, decode_fields, decode_nested, get_all, get_first, parse_message
from .person_parse import Person, PhoneNumber, parse_person
from .proto_wire import (
    Field,
    FieldError,
    FieldValue,
    InvalidLengthError,
    InvalidStringError,
    InvalidVarintError,
    InvalidWireTypeError,
    ProtoWireError,
    RecursionDepthError,
    UnexpectedWireTypeError,
    UnknownFieldError,
    WireType,
    parse_field,
    parse_varint,
    unpack_tag,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DecoderConfig",
    "Field",
    "FieldError",
    "FieldSink",
    "FieldValue",
    "InvalidLengthError",
    "InvalidStringError",
    "InvalidVarintError",
    "InvalidWireTypeError",
    "Person",
    "PhoneNumber",
    "ProtoWireError",
    "RawMessage",
    "RecursionDepthError",
    "UnexpectedWireTypeError",
    "UnknownFieldError",
    "WireType",
    "decode_fields",
    "decode_nested",
    "describe_message",
    "get_all",
    "get_first",
    "parse_field",
    "parse_message",
    "parse_person",
    "parse_varint",
    "unpack_tag",
]
