from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from tubeloop.models.segment import LoopSegment
from tubeloop.utils.timestamps import format_editable, format_time


class SegmentResponse(BaseModel):
    id: str
    label: str
    start: float
    end: float
    start_text: str
    end_text: str
    display: str

    @classmethod
    def from_segment(cls, segment: LoopSegment) -> "SegmentResponse":
        return cls(
            id=segment.id,
            label=segment.label,
            start=segment.start,
            end=segment.end,
            start_text=format_editable(segment.start),
            end_text=format_editable(segment.end),
            display=f"{format_time(segment.start)} - {format_time(segment.end)}",
        )


class SessionStateResponse(BaseModel):
    video_id: str | None = None
    input_text: str
    selected_segment_id: str | None = None
    segments: list[SegmentResponse]
    address_query: str


class ResolveLinkRequest(BaseModel):
    text: str


class ResolveLinkResponse(BaseModel):
    video_id: str
    segments: list[SegmentResponse]
    link: str


class BuildLinkRequest(BaseModel):
    video_id: str
    # Loose entries; sanitized the same way as a decoded `segments` parameter.
    segments: list[Any] = Field(default_factory=list)


class BuildLinkResponse(BaseModel):
    link: str
    address_query: str
    segments: list[SegmentResponse]
