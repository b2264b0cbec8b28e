"""Serialization helpers for segment lists carried in share links."""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from tubeloop.models.segment import LoopSegment, sort_segments
from tubeloop.utils.timestamps import round_seconds

logger = logging.getLogger("tubeloop.serializers")

DEFAULT_LABEL_PREFIX = "Loop"


def _default_label(index: int, prefix: str) -> str:
    return f"{prefix} {index + 1}"


_MISSING = object()


def _sanitize_timestamp(value: Any) -> float | None:
    """Coerce a bound the way a browser's `Number()` would; None when unusable.

    null and blank strings count as 0, booleans as 0 or 1. Absent keys,
    non-numeric strings, containers and non-finite values are rejected.
    """
    if value is _MISSING:
        return None
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(int(value))
    if not isinstance(value, (int, float, str)):
        return None
    if isinstance(value, str) and not value.strip():
        return 0.0
    try:
        numeric = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(numeric):
        return None
    return max(0.0, round_seconds(numeric))


def _compact_number(value: float) -> int | float:
    rounded = round_seconds(value)
    if rounded.is_integer():
        return int(rounded)
    return rounded


def decode_segment_items(
    items: Any, *, label_prefix: str = DEFAULT_LABEL_PREFIX
) -> list[LoopSegment]:
    """Sanitize already-parsed items into sorted segments with fresh ids."""
    if not isinstance(items, list):
        return []

    out: list[LoopSegment] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        raw_label = item.get("label")
        label = raw_label.strip() if isinstance(raw_label, str) else ""
        start = _sanitize_timestamp(item.get("start", _MISSING))
        end = _sanitize_timestamp(item.get("end", _MISSING))
        if start is None or end is None:
            continue
        out.append(
            LoopSegment.create(
                label=label or _default_label(index, label_prefix),
                start=start,
                end=end,
            )
        )
    return sort_segments(out)


def decode_segments(
    value: str | None, *, label_prefix: str = DEFAULT_LABEL_PREFIX
) -> list[LoopSegment]:
    """Decode a `segments` parameter; malformed input yields an empty list."""
    if not value:
        return []
    try:
        data = json.loads(value)
    except (ValueError, RecursionError) as exc:
        logger.debug("segments parameter is not valid JSON (error=%s)", exc)
        return []
    return decode_segment_items(data, label_prefix=label_prefix)


def serialize_segments(segments: list[LoopSegment]) -> list[dict[str, Any]]:
    return [
        {
            "label": s.label,
            "start": _compact_number(s.start),
            "end": _compact_number(s.end),
        }
        for s in segments
    ]


def encode_segments(segments: list[LoopSegment]) -> str | None:
    """Encode segments as compact JSON; None when there is nothing to share."""
    if not segments:
        return None
    try:
        return json.dumps(
            serialize_segments(segments),
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as exc:
        logger.warning("failed to serialize segments (count=%d, error=%s)", len(segments), exc)
        return None
