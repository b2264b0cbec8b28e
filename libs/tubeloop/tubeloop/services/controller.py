"""Looper session state.

`LooperController` owns everything a session mutates: the link input, the
loaded video id, the segment list and selection, the draft segment and the
mirrored playback state. It is the only writer of that state; a bound
`PlaybackSynchronizer` receives the derived player inputs after every change
and reports player events back through the `handle_*` methods.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from enum import Enum

from tubeloop.config import Settings
from tubeloop.error_codes import ErrorCode
from tubeloop.exceptions import InvalidInputError, PlayerError
from tubeloop.models.draft import Draft
from tubeloop.models.playback import PlaybackState
from tubeloop.models.segment import LoopRange, LoopSegment, sort_segments
from tubeloop.players.base import is_playing_state
from tubeloop.playback.synchronizer import PlaybackSynchronizer
from tubeloop.services.links import (
    InitialAppState,
    build_address_query,
    build_video_link,
    initial_state_from_query,
    resolve_input,
)

logger = logging.getLogger("tubeloop.controller")


class LinkEditState(str, Enum):
    """Whether the link input may be overwritten with the canonical link.

    CLEAN: input mirrors the canonical link and follows every change.
    DIRTY: the user is typing; regeneration is suppressed.
    COMMITTED: input was just submitted; the next regeneration overwrites it.
    """

    CLEAN = "clean"
    DIRTY = "dirty"
    COMMITTED = "committed"


class LooperController:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        initial: InitialAppState | None = None,
    ) -> None:
        self.settings = settings or Settings()
        init = initial or InitialAppState()

        self.input_text: str = init.input_text
        self.input_error: str | None = None
        self.input_error_code: ErrorCode | str | None = None
        self.link_state = LinkEditState.CLEAN

        self.video_id: str | None = init.video_id
        self._segments: list[LoopSegment] = sort_segments(list(init.segments))
        self.selected_segment_id: str | None = None
        if init.selected_segment_id and self._find(init.selected_segment_id) is not None:
            self.selected_segment_id = init.selected_segment_id

        self.draft = Draft()
        self.playback = PlaybackState()
        self.player_error: str | None = None

        self._synchronizer: PlaybackSynchronizer | None = None
        self._jumped_segment_id: str | None = None

    @classmethod
    def from_query(
        cls,
        query: str | Mapping[str, str | None],
        settings: Settings | None = None,
    ) -> "LooperController":
        """Restore a session from address-bar parameters."""
        settings = settings or Settings()
        initial = initial_state_from_query(
            query,
            watch_url=settings.links.watch_url,
            video_param=settings.links.video_param,
            segments_param=settings.links.segments_param,
            label_prefix=settings.segments.default_label_prefix,
        )
        return cls(settings, initial=initial)

    # ── derived state ────────────────────────────────────────────────────
    @property
    def segments(self) -> list[LoopSegment]:
        return list(self._segments)

    @property
    def selected_segment(self) -> LoopSegment | None:
        if self.selected_segment_id is None:
            return None
        return self._find(self.selected_segment_id)

    @property
    def loop_range(self) -> LoopRange | None:
        selected = self.selected_segment
        return selected.to_range() if selected is not None else None

    @property
    def has_video(self) -> bool:
        return self.video_id is not None

    @property
    def can_loop(self) -> bool:
        return self.selected_segment is not None

    @property
    def can_navigate_segments(self) -> bool:
        return bool(self._segments)

    @property
    def can_add_segment(self) -> bool:
        return self.draft.can_commit(self.settings.segments.min_length_s)

    @property
    def draft_errors(self) -> dict[str, ErrorCode]:
        return self.draft.field_errors(self.settings.segments.min_length_s)

    @property
    def progress_percent(self) -> float:
        return self.playback.progress_percent

    @property
    def canonical_link(self) -> str:
        if self.video_id is None:
            return ""
        return build_video_link(
            self.video_id,
            self._segments,
            watch_url=self.settings.links.watch_url,
            segments_param=self.settings.links.segments_param,
        )

    def address_query(self) -> str:
        return build_address_query(
            self.video_id,
            self._segments,
            video_param=self.settings.links.video_param,
            segments_param=self.settings.links.segments_param,
        )

    # ── synchronizer binding ─────────────────────────────────────────────
    def bind(self, synchronizer: PlaybackSynchronizer) -> None:
        self._synchronizer = synchronizer
        self._jumped_segment_id = self.selected_segment_id
        synchronizer.on_ready = self.handle_player_ready
        synchronizer.on_state_change = self.handle_state_change
        synchronizer.on_time_update = self.handle_time_update
        synchronizer.on_error = self.handle_player_error
        self._push_to_player()

    def handle_player_ready(self, duration: float) -> None:
        self.playback.duration = float(duration)
        self.player_error = None

    def handle_state_change(self, code: int) -> None:
        self.playback.is_playing = is_playing_state(code)

    def handle_time_update(self, current_time: float, duration: float) -> None:
        self.playback.current_time = float(current_time)
        if duration > 0:
            self.playback.duration = float(duration)

    def handle_player_error(self, error: PlayerError) -> None:
        self.player_error = error.message

    # ── link input ───────────────────────────────────────────────────────
    def edit_input(self, text: str) -> None:
        self.input_text = str(text)
        if self.video_id is not None and self.input_text == self.canonical_link:
            self.link_state = LinkEditState.CLEAN
        else:
            self.link_state = LinkEditState.DIRTY

    def blur_input(self, text: str | None = None) -> None:
        value = self.input_text if text is None else str(text)
        if self.video_id is None or value == self.canonical_link:
            self.link_state = LinkEditState.CLEAN

    def load_from(self, text: str | None = None) -> bool:
        """Load the video (and segments) referenced by the input text."""
        raw = self.input_text if text is None else str(text)
        try:
            resolved = resolve_input(
                raw,
                segments_param=self.settings.links.segments_param,
                label_prefix=self.settings.segments.default_label_prefix,
            )
        except InvalidInputError as exc:
            self.input_error = exc.message
            self.input_error_code = exc.error_code
            logger.info("rejected video input (error_code=%s)", exc.error_code)
            return False

        self.input_error = None
        self.input_error_code = None
        self.video_id = resolved.video_id
        self._segments = list(resolved.segments)
        self.selected_segment_id = self._segments[0].id if self._segments else None
        self.draft = Draft()
        self.playback.reset_position()
        self.link_state = LinkEditState.COMMITTED
        logger.info(
            "video loaded (video_id=%s, segments=%d)", self.video_id, len(self._segments)
        )
        self._changed(link=True)
        return True

    # ── draft ────────────────────────────────────────────────────────────
    def set_draft_label(self, label: str) -> None:
        self.draft = self.draft.with_label(label)

    def set_draft_start_text(self, text: str) -> None:
        self.draft = self.draft.with_start_text(text)

    def set_draft_end_text(self, text: str) -> None:
        self.draft = self.draft.with_end_text(text)

    def mark_start(self) -> None:
        self.draft = self.draft.mark_start(self.playback.current_time)

    def mark_end(self) -> None:
        self.draft = self.draft.mark_end(self.playback.current_time)

    def reset_draft(self) -> None:
        self.draft = Draft()

    def commit_draft(self) -> LoopSegment | None:
        """Turn the draft into a segment; None when the draft is incomplete or too short."""
        if not self.can_add_segment:
            return None
        start = float(self.draft.start or 0.0)
        end = float(self.draft.end or 0.0)
        duration = self.playback.duration
        if duration > 0:
            start = min(max(0.0, start), duration)
            end = min(max(0.0, end), duration)

        prefix = self.settings.segments.default_label_prefix
        label = self.draft.label.strip() or f"{prefix} {len(self._segments) + 1}"
        segment = LoopSegment.create(label=label, start=start, end=end)

        self._segments = sort_segments([*self._segments, segment])
        self.selected_segment_id = segment.id
        self.draft = Draft()
        logger.debug(
            "segment added (label=%s, start=%.2f, end=%.2f)", segment.label, segment.start, segment.end
        )
        self._changed(link=True)
        return segment

    # ── selection ────────────────────────────────────────────────────────
    def select(self, segment_id: str | None) -> bool:
        if segment_id is not None and self._find(segment_id) is None:
            return False
        self.selected_segment_id = segment_id
        self._changed()
        return True

    def select_next(self) -> LoopSegment | None:
        if not self._segments:
            return None
        index = self._selected_index()
        if index is None:
            target = 0
        else:
            target = index + 1 if index < len(self._segments) - 1 else 0
        return self._select_index(target)

    def select_previous(self) -> LoopSegment | None:
        if not self._segments:
            return None
        index = self._selected_index()
        if index is None:
            target = len(self._segments) - 1
        else:
            target = index - 1 if index > 0 else len(self._segments) - 1
        return self._select_index(target)

    # ── removal ──────────────────────────────────────────────────────────
    def remove(self, segment_id: str) -> bool:
        remaining = [s for s in self._segments if s.id != segment_id]
        if len(remaining) == len(self._segments):
            return False
        self._segments = remaining
        if self.selected_segment_id == segment_id:
            self.selected_segment_id = None
        self._changed(link=True)
        return True

    def remove_selected(self) -> bool:
        selected = self.selected_segment
        if selected is None:
            return False
        return self.remove(selected.id)

    def clear_all(self) -> None:
        self._segments = []
        self.selected_segment_id = None
        self._changed(link=True)

    # ── transport ────────────────────────────────────────────────────────
    def play_segment(self, segment_id: str) -> bool:
        already_selected = segment_id == self.selected_segment_id
        if not self.select(segment_id):
            return False
        segment = self.selected_segment
        sync = self._synchronizer
        if sync is not None and segment is not None and already_selected:
            sync.seek_to(segment.start, True)
            sync.play()
        return True

    def toggle_play(self) -> None:
        sync = self._synchronizer
        if sync is None:
            return
        if self.playback.is_playing:
            sync.pause()
            return
        selected = self.selected_segment
        if selected is not None:
            sync.seek_to(selected.start, True)
        sync.play()

    def toggle_looping(self) -> None:
        self.playback.looping_enabled = not self.playback.looping_enabled
        self._changed()

    def set_playback_rate(self, value: str | float) -> bool:
        try:
            rate = float(value)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(rate) or rate <= 0:
            return False
        self.playback.playback_rate = rate
        self._changed()
        return True

    # ── internals ────────────────────────────────────────────────────────
    def _find(self, segment_id: str) -> LoopSegment | None:
        return next((s for s in self._segments if s.id == segment_id), None)

    def _selected_index(self) -> int | None:
        for index, segment in enumerate(self._segments):
            if segment.id == self.selected_segment_id:
                return index
        return None

    def _select_index(self, index: int) -> LoopSegment:
        segment = self._segments[index]
        self.selected_segment_id = segment.id
        self._changed()
        return segment

    def _changed(self, *, link: bool = False) -> None:
        if link:
            self._refresh_link()
        self._push_to_player()

    def _refresh_link(self) -> None:
        if self.link_state == LinkEditState.DIRTY:
            return
        if self.video_id is not None:
            self.input_text = self.canonical_link
        self.link_state = LinkEditState.CLEAN

    def _push_to_player(self) -> None:
        sync = self._synchronizer
        if sync is None:
            return
        sync.set_video(self.video_id)
        sync.set_playback_rate(self.playback.playback_rate)
        sync.set_loop_range(self.loop_range)
        sync.set_looping(self.playback.looping_enabled)
        self._jump_to_selection(sync)

    def _jump_to_selection(self, sync: PlaybackSynchronizer) -> None:
        # Every newly selected segment starts playing from its start, looping or not.
        selected = self.selected_segment
        selected_id = selected.id if selected is not None else None
        if selected_id == self._jumped_segment_id:
            return
        self._jumped_segment_id = selected_id
        if selected is None:
            return
        sync.seek_to(selected.start, True)
        sync.play()
