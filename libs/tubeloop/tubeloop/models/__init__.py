"""Core data models for TubeLoop."""

from tubeloop.models.draft import Draft
from tubeloop.models.playback import PlaybackState
from tubeloop.models.segment import LoopRange, LoopSegment, generate_segment_id, sort_segments
from tubeloop.models.serializers import decode_segments, encode_segments

__all__ = [
    "Draft",
    "LoopRange",
    "LoopSegment",
    "PlaybackState",
    "decode_segments",
    "encode_segments",
    "generate_segment_id",
    "sort_segments",
]
