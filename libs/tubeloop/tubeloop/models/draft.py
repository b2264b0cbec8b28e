"""Draft segment being built from the input fields.

The numeric bounds always follow their text fields: editing a text re-parses
it, marking from the play head writes both. Transitions return new drafts.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from tubeloop.error_codes import ErrorCode
from tubeloop.utils.timestamps import format_editable, parse_timestamp, round_seconds


@dataclass(frozen=True)
class Draft:
    label: str = ""
    start: float | None = None
    end: float | None = None
    start_text: str = ""
    end_text: str = ""

    def with_label(self, label: str) -> "Draft":
        return replace(self, label=str(label))

    def with_start_text(self, text: str) -> "Draft":
        return replace(self, start_text=str(text), start=parse_timestamp(text))

    def with_end_text(self, text: str) -> "Draft":
        return replace(self, end_text=str(text), end=parse_timestamp(text))

    def mark_start(self, seconds: float) -> "Draft":
        value = round_seconds(seconds)
        return replace(self, start=value, start_text=format_editable(value))

    def mark_end(self, seconds: float) -> "Draft":
        value = round_seconds(seconds)
        return replace(self, end=value, end_text=format_editable(value))

    def can_commit(self, min_length_s: float) -> bool:
        if self.start is None or self.end is None:
            return False
        # Bounds carry 2 decimals; compare the rounded difference.
        return round_seconds(self.end - self.start) >= min_length_s

    def field_errors(self, min_length_s: float) -> dict[str, ErrorCode]:
        """Field-level validation messages keyed by field name."""
        errors: dict[str, ErrorCode] = {}
        if self.start_text.strip() and self.start is None:
            errors["start"] = ErrorCode.INVALID_TIMESTAMP
        if self.end_text.strip() and self.end is None:
            errors["end"] = ErrorCode.INVALID_TIMESTAMP
        if (
            not errors
            and self.start is not None
            and self.end is not None
            and not self.can_commit(min_length_s)
        ):
            errors["end"] = ErrorCode.SEGMENT_TOO_SHORT
        return errors
