"""Filters used when rendering language templates."""

from __future__ import annotations

import re
from typing import Any

_COLOR_INDEX_RE = re.compile(r"\{\d+\}")
_HEX_DIGITS_RE = re.compile(r"\+?[0-9A-Fa-f]+")


def strip_color_tokens(value: Any) -> str:
    """Remove every `{n}` color marker from the given string."""
    if not isinstance(value, str):
        raise TypeError("expected string")
    return _COLOR_INDEX_RE.sub("", value)


def hex_to_rgb(value: Any) -> dict[str, int]:
    """Convert a `#rrggbb` string into its red, green and blue channels."""
    if not isinstance(value, str):
        raise TypeError("expected string")
    if not value.startswith("#"):
        raise ValueError("expected hex string starting with `#`")
    digits = value[1:]
    if len(digits.encode("utf-8")) != 6:
        raise ValueError("expected a 6 digit hex string")
    if not _HEX_DIGITS_RE.fullmatch(digits):
        raise ValueError("expected a valid hex string")
    channels = int(digits, 16)
    return {
        "r": (channels >> 16) & 0xFF,
        "g": (channels >> 8) & 0xFF,
        "b": channels & 0xFF,
    }