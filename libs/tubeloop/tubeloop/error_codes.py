"""Canonical error codes surfaced to API/UI."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"

    INVALID_VIDEO_REFERENCE = "INVALID_VIDEO_REFERENCE"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    SEGMENT_TOO_SHORT = "SEGMENT_TOO_SHORT"

    PLAYER_LOAD_FAILED = "PLAYER_LOAD_FAILED"
    PLAYER_FAILED = "PLAYER_FAILED"
