from __future__ import annotations

import enum
import sys
from dataclasses import dataclass

from .config import DEFAULT_CONFIG, DecoderConfig
from .const import (
    DEFAULT_MAX_VARINT_GROUPS,
    FIXED32_SIZE,
    TAG_TYPE_BITS,
    TAG_TYPE_MASK,
    VARINT_VALUE_LIMIT,
    WIRE_TYPE_FIXED32,
    WIRE_TYPE_LENGTH_DELIMITED,
    WIRE_TYPE_VARINT,
)

BytesLike = bytes | bytearray | memoryview


class ProtoWireError(ValueError):
    pass


class InvalidVarintError(ProtoWireError):
    pass


class InvalidWireTypeError(ProtoWireError):
    def __init__(self, code: int) -> None:
        super().__init__(f"invalid wire type: {code}")
        self.code = code


class InvalidLengthError(ProtoWireError):
    pass


class UnexpectedWireTypeError(ProtoWireError):
    def __init__(self, expected: WireType, actual: WireType) -> None:
        super().__init__(f"unexpected wire type: expected {expected.name}, got {actual.name}")
        self.expected = expected
        self.actual = actual


class InvalidStringError(ProtoWireError):
    pass


class FieldError(ProtoWireError):
    """Raised by a field sink that rejects a field."""


class UnknownFieldError(FieldError):
    def __init__(self, number: int, record: str) -> None:
        super().__init__(f"unknown field {number} for {record}")
        self.number = number
        self.record = record


class RecursionDepthError(ProtoWireError):
    pass


class WireType(enum.IntEnum):
    VARINT = WIRE_TYPE_VARINT
    LENGTH_DELIMITED = WIRE_TYPE_LENGTH_DELIMITED
    FIXED32 = WIRE_TYPE_FIXED32

    @classmethod
    def from_code(cls, code: int) -> WireType:
        try:
            return cls(code)
        except ValueError:
            raise InvalidWireTypeError(code) from None


def as_view(data: BytesLike) -> memoryview:
    """Return a flat, read-only byte view over `data` without copying it."""
    view = data if isinstance(data, memoryview) else memoryview(data)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view.toreadonly()


def parse_varint(data: BytesLike, *, max_groups: int = DEFAULT_MAX_VARINT_GROUPS) -> tuple[int, memoryview]:
    """Decode a varint from the front of `data`.

    Returns the value and the unconsumed remainder. The first byte carries the
    least-significant 7 bits. At most `max_groups` bytes are read; a varint that
    runs past the cap or past the end of the buffer, or that does not fit in 64
    bits, raises InvalidVarintError.
    """
    view = as_view(data)
    for i in range(min(max_groups, len(view))):
        if view[i] & 0x80:
            continue
        value = 0
        for b in reversed(view[: i + 1]):
            value = (value << 7) | (b & 0x7F)
        if value >= VARINT_VALUE_LIMIT:
            raise InvalidVarintError("varint overflows 64 bits")
        return value, view[i + 1 :]
    if len(view) < max_groups:
        raise InvalidVarintError("truncated varint")
    raise InvalidVarintError(f"varint longer than {max_groups} bytes")


def unpack_tag(tag: int) -> tuple[int, WireType]:
    return tag >> TAG_TYPE_BITS, WireType.from_code(tag & TAG_TYPE_MASK)


def _to_i32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass(frozen=True)
class FieldValue:
    """A field payload. Length-delimited payloads are views into the source buffer."""

    wire_type: WireType
    raw: int | memoryview

    @classmethod
    def varint(cls, value: int) -> FieldValue:
        return cls(WireType.VARINT, value)

    @classmethod
    def length_delimited(cls, data: BytesLike) -> FieldValue:
        return cls(WireType.LENGTH_DELIMITED, as_view(data))

    @classmethod
    def fixed32(cls, value: int) -> FieldValue:
        return cls(WireType.FIXED32, _to_i32(value))

    def _expect(self, wire_type: WireType) -> None:
        if self.wire_type is not wire_type:
            raise UnexpectedWireTypeError(wire_type, self.wire_type)

    def as_string(self) -> str:
        self._expect(WireType.LENGTH_DELIMITED)
        try:
            return str(self.raw, "utf-8")
        except UnicodeDecodeError as e:
            raise InvalidStringError(f"invalid string (not UTF-8): {e.reason}") from e

    def as_bytes(self) -> memoryview:
        self._expect(WireType.LENGTH_DELIMITED)
        return self.raw

    def as_u64(self) -> int:
        self._expect(WireType.VARINT)
        return self.raw

    def as_i32(self) -> int:
        self._expect(WireType.FIXED32)
        return self.raw

    def __repr__(self) -> str:
        raw = bytes(self.raw) if isinstance(self.raw, memoryview) else self.raw
        return f"FieldValue({self.wire_type.name}, {raw!r})"


@dataclass(frozen=True)
class Field:
    number: int
    value: FieldValue

    @property
    def wire_type(self) -> WireType:
        return self.value.wire_type


def _parse_length_delimited(data: memoryview, config: DecoderConfig) -> tuple[FieldValue, memoryview]:
    length, rest = parse_varint(data, max_groups=config.max_varint_groups)
    if length > sys.maxsize:
        raise InvalidLengthError(f"length {length} cannot be used as a slice index")
    if length > len(rest):
        raise InvalidLengthError(f"length-delimited field declares {length} bytes but only {len(rest)} remain")
    return FieldValue(WireType.LENGTH_DELIMITED, rest[:length]), rest[length:]


def _parse_fixed32(data: memoryview, config: DecoderConfig) -> tuple[FieldValue, memoryview]:
    if config.fixed32_via_varint:
        value, rest = parse_varint(data, max_groups=config.max_varint_groups)
        return FieldValue.fixed32(value), rest
    if len(data) < FIXED32_SIZE:
        raise InvalidLengthError("truncated fixed32")
    value = int.from_bytes(data[:FIXED32_SIZE], "little", signed=True)
    return FieldValue(WireType.FIXED32, value), data[FIXED32_SIZE:]


def parse_field(data: BytesLike, config: DecoderConfig | None = None) -> tuple[Field, memoryview]:
    """Decode exactly one field from the front of `data` and return it with the remainder."""
    config = config or DEFAULT_CONFIG
    tag, rest = parse_varint(data, max_groups=config.max_varint_groups)
    number, wire_type = unpack_tag(tag)

    if wire_type is WireType.VARINT:
        value, rest = parse_varint(rest, max_groups=config.max_varint_groups)
        return Field(number, FieldValue.varint(value)), rest
    if wire_type is WireType.LENGTH_DELIMITED:
        fv, rest = _parse_length_delimited(rest, config)
        return Field(number, fv), rest
    fv, rest = _parse_fixed32(rest, config)
    return Field(number, fv), rest
