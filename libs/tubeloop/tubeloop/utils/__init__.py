"""Utility helpers."""

from tubeloop.utils.timestamps import format_editable, format_time, parse_timestamp, round_seconds
from tubeloop.utils.video_id import extract_video_id, is_video_id

__all__ = [
    "extract_video_id",
    "format_editable",
    "format_time",
    "is_video_id",
    "parse_timestamp",
    "round_seconds",
]
