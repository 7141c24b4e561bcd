from __future__ import annotations

import pytest

from wiredecode.config import DecoderConfig
from wiredecode.const import DEFAULT_MAX_VARINT_GROUPS
from wiredecode.message import decode_fields
from wiredecode.proto_wire import InvalidVarintError, parse_varint

from wire_helpers import encode_varint

# 7 groups of 7 bits
MAX_DEFAULT_VARINT = (1 << 49) - 1


def test_varint_decodes_and_reports_consumed_bytes() -> None:
    for value in (0, 1, 127, 128, 300, 16383, 16384, 2**31, 2**35 + 7, MAX_DEFAULT_VARINT):
        encoded = encode_varint(value)
        data = encoded + b"\xaa\xbb"
        decoded, rest = parse_varint(data)
        assert decoded == value
        assert len(data) - len(rest) == len(encoded)
        assert bytes(rest) == b"\xaa\xbb"


def test_varint_known_encodings() -> None:
    assert parse_varint(b"\x96\x01")[0] == 150
    assert parse_varint(b"\xac\x02")[0] == 300
    assert parse_varint(b"\x2a")[0] == 42


def test_varint_empty_input() -> None:
    with pytest.raises(InvalidVarintError):
        parse_varint(b"")


def test_varint_seven_continuation_bytes() -> None:
    with pytest.raises(InvalidVarintError):
        parse_varint(b"\xff" * DEFAULT_MAX_VARINT_GROUPS)


def test_varint_cap_rejects_values_needing_eight_groups() -> None:
    encoded = encode_varint(MAX_DEFAULT_VARINT + 1)
    assert len(encoded) == 8
    with pytest.raises(InvalidVarintError):
        parse_varint(encoded)


def test_varint_wider_cap_allows_full_64_bit_range() -> None:
    value = 2**64 - 1
    encoded = encode_varint(value)
    assert len(encoded) == 10
    decoded, rest = parse_varint(encoded, max_groups=10)
    assert decoded == value
    assert len(rest) == 0


def test_varint_wider_cap_rejects_values_past_64_bits() -> None:
    # Ten groups carry 70 bits; anything above the low bit of the last byte overflows.
    for last in (0x02, 0x7F):
        with pytest.raises(InvalidVarintError):
            parse_varint(b"\xff" * 9 + bytes([last]), max_groups=10)


def test_field_values_and_tags_stay_within_64_bits() -> None:
    config = DecoderConfig(max_varint_groups=10)
    with pytest.raises(InvalidVarintError):
        decode_fields(b"\x08" + b"\xff" * 9 + b"\x7f", config=config)
    with pytest.raises(InvalidVarintError):
        decode_fields(b"\xff" * 9 + b"\x7f" + b"\x00", config=config)
    assert decode_fields(b"\x08" + b"\xff" * 9 + b"\x01", config=config)[0].value.as_u64() == 2**64 - 1
