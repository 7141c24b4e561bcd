"""Test-only encoder used to build wire-format fixtures."""

from __future__ import annotations

import struct


def encode_varint(value: int) -> bytes:
    if value < 0:
        raise ValueError("negative varint not supported")
    out = bytearray()
    while True:
        b = value & 0x7F
        value >>= 7
        if value:
            out.append(b | 0x80)
        else:
            out.append(b)
            break
    return bytes(out)


def encode_key(field_number: int, wire_type: int) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


def encode_bytes_field(field_number: int, payload: bytes) -> bytes:
    return encode_key(field_number, 2) + encode_varint(len(payload)) + payload


def encode_string(field_number: int, value: str) -> bytes:
    return encode_bytes_field(field_number, value.encode("utf-8"))


def encode_varint_field(field_number: int, value: int) -> bytes:
    return encode_key(field_number, 0) + encode_varint(value)


def encode_fixed32_field(field_number: int, value: int) -> bytes:
    return encode_key(field_number, 5) + struct.pack("<i", value)
