"""YouTube video id extraction."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

_SHORT_HOSTS = frozenset({"youtu.be"})
_WATCH_HOSTS = frozenset({"youtube.com", "m.youtube.com"})
_NOCOOKIE_HOSTS = frozenset({"youtube-nocookie.com"})


def is_video_id(value: str | None) -> bool:
    return bool(value) and VIDEO_ID_RE.fullmatch(str(value)) is not None


def _path_segments(path: str) -> list[str]:
    return [p for p in path.split("/") if p]


def _after_embed(path: str) -> str | None:
    segments = _path_segments(path)
    try:
        idx = segments.index("embed")
    except ValueError:
        return None
    if idx + 1 < len(segments):
        return segments[idx + 1]
    return None


def _candidate_from_url(text: str) -> str | None:
    try:
        parsed = urlsplit(text)
        host = parsed.hostname
    except ValueError:
        return None
    if not parsed.scheme or not host:
        return None

    host = host.lower()
    if host.startswith("www."):
        host = host[len("www.") :]

    if host in _SHORT_HOSTS:
        segments = _path_segments(parsed.path)
        return segments[0] if segments else None

    if host in _WATCH_HOSTS:
        values = parse_qs(parsed.query).get("v") or []
        if values and values[0]:
            return values[0]
        return _after_embed(parsed.path)

    if host in _NOCOOKIE_HOSTS:
        return _after_embed(parsed.path)

    return None


def extract_video_id(raw: str | None) -> str | None:
    """Extract a YouTube video id from a bare id or a watch/short/embed URL.

    Returns None (never raises) when no valid 11-character id can be found.
    """
    text = str(raw or "").strip()
    if not text:
        return None
    if is_video_id(text):
        return text

    candidate = _candidate_from_url(text)
    if candidate is None or not is_video_id(candidate):
        return None
    return candidate
