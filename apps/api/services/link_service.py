"""Link resolution and session restore on top of tubeloop.services.links."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tubeloop.config import Settings
from tubeloop.error_codes import ErrorCode
from tubeloop.exceptions import InvalidInputError
from tubeloop.models.segment import LoopSegment
from tubeloop.models.serializers import decode_segment_items
from tubeloop.services.links import (
    INVALID_VIDEO_MESSAGE,
    InitialAppState,
    ResolvedInput,
    build_address_query,
    build_video_link,
    initial_state_from_query,
    resolve_input,
)
from tubeloop.utils.video_id import is_video_id

logger = logging.getLogger("tubeloop.api")


class LinkService:
    def __init__(self, settings: Settings):
        self.settings = settings

    def link_for(self, video_id: str, segments: list[LoopSegment]) -> str:
        return build_video_link(
            video_id,
            segments,
            watch_url=self.settings.links.watch_url,
            segments_param=self.settings.links.segments_param,
        )

    def address_query_for(self, video_id: str | None, segments: list[LoopSegment]) -> str:
        return build_address_query(
            video_id,
            segments,
            video_param=self.settings.links.video_param,
            segments_param=self.settings.links.segments_param,
        )

    def resolve(self, text: str) -> ResolvedInput:
        resolved = resolve_input(
            text,
            segments_param=self.settings.links.segments_param,
            label_prefix=self.settings.segments.default_label_prefix,
        )
        logger.info(
            "input resolved (video_id=%s, segments=%d)", resolved.video_id, len(resolved.segments)
        )
        return resolved

    def build(self, video_id: str, items: list[Any]) -> tuple[str, str, list[LoopSegment]]:
        video_id = str(video_id or "").strip()
        if not is_video_id(video_id):
            raise InvalidInputError(
                "video_id", INVALID_VIDEO_MESSAGE, error_code=ErrorCode.INVALID_VIDEO_REFERENCE
            )
        segments = decode_segment_items(
            list(items), label_prefix=self.settings.segments.default_label_prefix
        )
        return self.link_for(video_id, segments), self.address_query_for(video_id, segments), segments

    def initial_state(self, query: str | Mapping[str, str | None]) -> InitialAppState:
        return initial_state_from_query(
            query,
            watch_url=self.settings.links.watch_url,
            video_param=self.settings.links.video_param,
            segments_param=self.settings.links.segments_param,
            label_prefix=self.settings.segments.default_label_prefix,
        )
