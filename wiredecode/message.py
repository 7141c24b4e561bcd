from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from .config import DEFAULT_CONFIG, DecoderConfig
from .proto_wire import (
    BytesLike,
    Field,
    FieldValue,
    ProtoWireError,
    RecursionDepthError,
    WireType,
    as_view,
    parse_field,
)

_LOGGER = logging.getLogger(__name__)


class FieldSink(Protocol):
    """A record shape that can be built one decoded field at a time.

    Implementations must be constructible with no arguments. `add_field` either
    updates the record or raises a ProtoWireError (usually a FieldError).
    """

    def add_field(self, field: Field) -> None: ...


SinkT = TypeVar("SinkT", bound=FieldSink)


@dataclass(frozen=True)
class _DecodeState:
    config: DecoderConfig
    depth: int


# Set for the duration of one parse_message() call so that nested decodes
# started from inside a sink see the outer config and depth.
_STATE: ContextVar[_DecodeState | None] = ContextVar("wiredecode_state", default=None)


def parse_message(data: BytesLike, sink_type: Callable[[], SinkT], *, config: DecoderConfig | None = None) -> SinkT:
    """Decode every field in `data` into a fresh `sink_type()` record.

    The whole buffer must be consumed; the first error from the field decoder or
    the sink aborts the call. When called from inside a sink (nested decoding),
    the outer config is inherited unless `config` is given, and the nesting depth
    is checked against `config.max_depth`.
    """
    view = as_view(data)
    outer = _STATE.get()
    if outer is None:
        state = _DecodeState(config or DEFAULT_CONFIG, 0)
    else:
        state = _DecodeState(config or outer.config, outer.depth + 1)
        if state.depth > state.config.max_depth:
            raise RecursionDepthError(f"message nesting exceeds max_depth={state.config.max_depth}")
        _LOGGER.debug("Decoding nested %s at depth %d (len=%d)", _sink_name(sink_type), state.depth, len(view))

    token = _STATE.set(state)
    try:
        result = sink_type()
        rest = view
        while rest:
            decoded, rest = parse_field(rest, state.config)
            result.add_field(decoded)
    except ProtoWireError as e:
        if outer is None:
            _LOGGER.debug("Decoding %s failed (len=%d): %s", _sink_name(sink_type), len(view), e)
        raise
    finally:
        _STATE.reset(token)

    if outer is None:
        _LOGGER.debug("Decoded %s from %d bytes", _sink_name(sink_type), len(view))
    return result


def decode_nested(value: Field | FieldValue, sink_type: Callable[[], SinkT]) -> SinkT:
    """Decode a length-delimited field as a nested record of type `sink_type`."""
    fv = value.value if isinstance(value, Field) else value
    return parse_message(fv.as_bytes(), sink_type)


def _sink_name(sink_type: Callable[[], object]) -> str:
    return getattr(sink_type, "__name__", repr(sink_type))


def get_first(fields: list[Field], *, number: int, wire_type: WireType | None = None) -> Field | None:
    for f in fields:
        if f.number != number:
            continue
        if wire_type is not None and f.wire_type != wire_type:
            continue
        return f
    return None


def get_all(fields: list[Field], *, number: int, wire_type: WireType | None = None) -> list[Field]:
    out: list[Field] = []
    for f in fields:
        if f.number != number:
            continue
        if wire_type is not None and f.wire_type != wire_type:
            continue
        out.append(f)
    return out


@dataclass
class RawMessage:
    """Sink that keeps every field, in wire order, without interpreting it."""

    fields: list[Field] = field(default_factory=list)

    def add_field(self, field: Field) -> None:
        self.fields.append(field)

    def get_first(self, number: int, wire_type: WireType | None = None) -> Field | None:
        return get_first(self.fields, number=number, wire_type=wire_type)

    def get_all(self, number: int, wire_type: WireType | None = None) -> list[Field]:
        return get_all(self.fields, number=number, wire_type=wire_type)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


def decode_fields(data: BytesLike, *, config: DecoderConfig | None = None) -> list[Field]:
    return parse_message(data, RawMessage, config=config).fields
