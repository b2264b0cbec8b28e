"""Share links and address-bar state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlencode, urlsplit

from tubeloop.error_codes import ErrorCode
from tubeloop.exceptions import InvalidInputError
from tubeloop.models.segment import LoopSegment
from tubeloop.models.serializers import DEFAULT_LABEL_PREFIX, decode_segments, encode_segments
from tubeloop.utils.video_id import extract_video_id, is_video_id

DEFAULT_WATCH_URL = "https://www.youtube.com/watch"
VIDEO_PARAM = "video"
SEGMENTS_PARAM = "segments"

INVALID_VIDEO_MESSAGE = "Please enter a valid YouTube URL or ID."


@dataclass(frozen=True)
class ResolvedInput:
    video_id: str
    segments: list[LoopSegment] = field(default_factory=list)


@dataclass(frozen=True)
class InitialAppState:
    video_id: str | None = None
    segments: list[LoopSegment] = field(default_factory=list)
    input_text: str = ""
    selected_segment_id: str | None = None


def build_video_link(
    video_id: str,
    segments: list[LoopSegment],
    *,
    watch_url: str = DEFAULT_WATCH_URL,
    segments_param: str = SEGMENTS_PARAM,
) -> str:
    params = {"v": video_id}
    encoded = encode_segments(segments)
    if encoded:
        params[segments_param] = encoded
    return f"{watch_url}?{urlencode(params)}"


def _query_values(query: str | Mapping[str, str | None]) -> dict[str, str]:
    if isinstance(query, Mapping):
        return {str(k): str(v) for k, v in query.items() if v is not None}
    raw = str(query or "")
    if raw.startswith("?"):
        raw = raw[1:]
    # First value wins, like URLSearchParams.get().
    return {k: v[0] for k, v in parse_qs(raw, keep_blank_values=True).items() if v}


def extract_segments_from_input(
    text: str,
    *,
    segments_param: str = SEGMENTS_PARAM,
    label_prefix: str = DEFAULT_LABEL_PREFIX,
) -> list[LoopSegment]:
    """Decode the segments carried by a pasted link; [] for non-URL text."""
    try:
        parsed = urlsplit(str(text or "").strip())
    except ValueError:
        return []
    if not parsed.scheme or not parsed.netloc:
        return []
    value = _query_values(parsed.query).get(segments_param)
    return decode_segments(value, label_prefix=label_prefix)


def resolve_input(
    text: str,
    *,
    segments_param: str = SEGMENTS_PARAM,
    label_prefix: str = DEFAULT_LABEL_PREFIX,
) -> ResolvedInput:
    """Split pasted text into (video id, segments).

    Raises InvalidInputError when no video id can be found.
    """
    video_id = extract_video_id(text)
    if video_id is None:
        raise InvalidInputError(
            "video",
            INVALID_VIDEO_MESSAGE,
            error_code=ErrorCode.INVALID_VIDEO_REFERENCE,
        )
    segments = extract_segments_from_input(
        text, segments_param=segments_param, label_prefix=label_prefix
    )
    return ResolvedInput(video_id=video_id, segments=segments)


def build_address_query(
    video_id: str | None,
    segments: list[LoopSegment],
    *,
    video_param: str = VIDEO_PARAM,
    segments_param: str = SEGMENTS_PARAM,
) -> str:
    params: dict[str, str] = {}
    if video_id:
        params[video_param] = video_id
    encoded = encode_segments(segments)
    if encoded:
        params[segments_param] = encoded
    return urlencode(params)


def initial_state_from_query(
    query: str | Mapping[str, str | None],
    *,
    watch_url: str = DEFAULT_WATCH_URL,
    video_param: str = VIDEO_PARAM,
    segments_param: str = SEGMENTS_PARAM,
    label_prefix: str = DEFAULT_LABEL_PREFIX,
) -> InitialAppState:
    """Restore a session from the address-bar `video`/`segments` parameters."""
    values = _query_values(query)
    raw_video = values.get(video_param)
    video_id = raw_video if is_video_id(raw_video) else None
    segments = decode_segments(values.get(segments_param), label_prefix=label_prefix)
    input_text = ""
    if video_id is not None:
        input_text = build_video_link(
            video_id, segments, watch_url=watch_url, segments_param=segments_param
        )
    return InitialAppState(
        video_id=video_id,
        segments=segments,
        input_text=input_text,
        selected_segment_id=segments[0].id if segments else None,
    )
