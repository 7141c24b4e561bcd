from __future__ import annotations

from typing import Any

from .const import DEFAULT_MAX_DEPTH
from .message import decode_fields
from .proto_wire import BytesLike, Field, ProtoWireError, WireType, as_view


def _describe_payload(payload: memoryview, depth: int, max_depth: int) -> dict[str, Any]:
    try:
        text = str(payload, "utf-8")
    except UnicodeDecodeError:
        text = None
    # Printable text wins over a nested message; short strings often happen to
    # parse as valid fields too.
    if text is not None and text.isprintable():
        return {"string": text}

    if depth < max_depth:
        try:
            nested = decode_fields(payload)
        except ProtoWireError:
            nested = None
        if nested:
            return {"message": [_describe_field(f, depth + 1, max_depth) for f in nested]}

    return {"bytes": bytes(payload).hex()}


def _describe_field(f: Field, depth: int, max_depth: int) -> dict[str, Any]:
    out: dict[str, Any] = {"number": f.number, "wire_type": f.wire_type.name.lower()}
    if f.wire_type is WireType.LENGTH_DELIMITED:
        out.update(_describe_payload(f.value.as_bytes(), depth, max_depth))
    else:
        out["value"] = f.value.raw
    return out


def describe_message(data: BytesLike, *, max_depth: int = DEFAULT_MAX_DEPTH) -> dict[str, Any]:
    """Best-effort, schema-less view of a buffer for debugging. Never raises on bad input."""
    view = as_view(data)
    try:
        fields = decode_fields(view)
    except ProtoWireError as e:
        return {"ok": False, "error": str(e), "len": len(view)}
    return {"ok": True, "fields": [_describe_field(f, 0, max_depth) for f in fields]}
