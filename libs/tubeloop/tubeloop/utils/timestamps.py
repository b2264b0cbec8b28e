"""Timestamp text <-> seconds conversion.

`format_time` renders a play-head position for display (whole seconds,
hour field when needed). `format_editable` renders a value for an input
field (`mm:ss[.ff]`, never an hour field) and `parse_timestamp` reads
user text back, accepting any number of colon-separated fields.
"""

from __future__ import annotations

import math
import re

_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_DIGITS_RE = re.compile(r"[0-9]+")


def _is_finite(value: float | None) -> bool:
    if value is None:
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def round_seconds(value: float) -> float:
    """Round seconds to the 2-decimal precision used everywhere."""
    return round(float(value), 2)


def format_time(seconds: float | None) -> str:
    if not _is_finite(seconds):
        return "00:00"
    total = max(0, math.floor(float(seconds)))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_editable(seconds: float | None) -> str:
    if not _is_finite(seconds):
        return ""
    clamped = max(0.0, round_seconds(float(seconds)))
    # Work in hundredths so the seconds field carries into minutes exactly.
    total_cs = int(round(clamped * 100))
    minutes, rem_cs = divmod(total_cs, 6000)
    secs, frac = divmod(rem_cs, 100)
    if frac > 0:
        return f"{minutes:02d}:{secs:02d}.{frac:02d}"
    return f"{minutes:02d}:{secs:02d}"


def _parse_decimal(text: str) -> float | None:
    cleaned = text.strip()
    if not _DECIMAL_RE.fullmatch(cleaned):
        return None
    return float(cleaned)


def parse_timestamp(text: str | None) -> float | None:
    """Parse `ss`, `mm:ss`, `hh:mm:ss[.ff]` (any depth) into seconds.

    Returns None for empty or malformed text.
    """
    trimmed = str(text or "").strip()
    if not trimmed:
        return None

    if ":" not in trimmed:
        value = _parse_decimal(trimmed)
        if value is None:
            return None
        return max(0.0, round_seconds(value))

    parts = trimmed.split(":")
    total = 0.0
    multiplier = 1
    for index in range(len(parts) - 1, -1, -1):
        part = parts[index]
        if part == "":
            return None
        if index == len(parts) - 1:
            value = _parse_decimal(part)
            if value is None:
                return None
            total += value * multiplier
        else:
            if not _DIGITS_RE.fullmatch(part):
                return None
            total += int(part) * multiplier
        multiplier *= 60

    return max(0.0, round_seconds(total))
