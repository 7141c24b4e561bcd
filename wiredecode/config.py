from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    CONF_FIXED32_VIA_VARINT,
    CONF_MAX_DEPTH,
    CONF_MAX_VARINT_GROUPS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_VARINT_GROUPS,
    MAX_VARINT_GROUPS_LIMIT,
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_MAX_VARINT_GROUPS, default=DEFAULT_MAX_VARINT_GROUPS): vol.All(
            int, vol.Range(min=1, max=MAX_VARINT_GROUPS_LIMIT)
        ),
        vol.Optional(CONF_MAX_DEPTH, default=DEFAULT_MAX_DEPTH): vol.All(int, vol.Range(min=0)),
        vol.Optional(CONF_FIXED32_VIA_VARINT, default=False): bool,
    }
)


@dataclass(frozen=True)
class DecoderConfig:
    max_varint_groups: int = DEFAULT_MAX_VARINT_GROUPS
    max_depth: int = DEFAULT_MAX_DEPTH
    # Legacy mode: read fixed32 payloads as a varint and keep the low 32 bits.
    fixed32_via_varint: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.max_varint_groups <= MAX_VARINT_GROUPS_LIMIT:
            raise ValueError(f"max_varint_groups must be between 1 and {MAX_VARINT_GROUPS_LIMIT}")
        if self.max_depth < 0:
            raise ValueError("max_depth must not be negative")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None = None) -> DecoderConfig:
        """Build a config from user-supplied options, raising vol.Invalid on bad input."""
        validated = CONFIG_SCHEMA(dict(data or {}))
        return cls(
            max_varint_groups=validated[CONF_MAX_VARINT_GROUPS],
            max_depth=validated[CONF_MAX_DEPTH],
            fixed32_via_varint=validated[CONF_FIXED32_VIA_VARINT],
        )


DEFAULT_CONFIG = DecoderConfig()
