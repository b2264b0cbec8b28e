"""Player synchronization loop.

A `PlaybackSynchronizer` owns one embedded player and one recurring poll task.
Each tick reads the play head, reports it upward and, while looping, seeks
back to the active range start once the play head gets within the loop
threshold of the range end. Everything runs on a single event loop; player
callbacks and the poll task never overlap.

States: UNINITIALIZED -> READY. Every player command is a no-op until the
player reports ready and again after `dispose()`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from tubeloop.error_codes import ErrorCode
from tubeloop.exceptions import PlayerError, PlayerLoadError
from tubeloop.models.segment import LoopRange
from tubeloop.players.base import MediaPlayer, PlayerEvents, PlayerLoader

if TYPE_CHECKING:
    from tubeloop.config import Settings

logger = logging.getLogger("tubeloop.playback")

POLL_INTERVAL_S = 0.25
LOOP_THRESHOLD_S = 0.15


class SyncState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class PlaybackSynchronizer:
    def __init__(
        self,
        loader: PlayerLoader,
        *,
        poll_interval_s: float = POLL_INTERVAL_S,
        loop_threshold_s: float = LOOP_THRESHOLD_S,
        allow_seek_ahead: bool = True,
        on_ready: Callable[[float], None] | None = None,
        on_state_change: Callable[[int], None] | None = None,
        on_time_update: Callable[[float, float], None] | None = None,
        on_error: Callable[[PlayerError], None] | None = None,
    ) -> None:
        self._loader = loader
        self._poll_interval_s = float(poll_interval_s)
        self._loop_threshold_s = float(loop_threshold_s)
        self._allow_seek_ahead = bool(allow_seek_ahead)

        self.on_ready = on_ready
        self.on_state_change = on_state_change
        self.on_time_update = on_time_update
        self.on_error = on_error

        self._player: MediaPlayer | None = None
        self._ready = False
        self._alive = True
        self._poll_task: asyncio.Task[None] | None = None

        self._video_id: str | None = None
        self._loop_range: LoopRange | None = None
        self._looping = False
        self._playback_rate = 1.0

        self.last_error: PlayerError | None = None

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        *,
        loader: PlayerLoader | None = None,
        **callbacks: Any,
    ) -> "PlaybackSynchronizer":
        if loader is None:
            from tubeloop.players.registry import get_player_loader

            loader = get_player_loader(settings.player_config())
        return cls(
            loader,
            poll_interval_s=settings.poll_interval_s,
            loop_threshold_s=float(settings.player.loop_threshold_s),
            allow_seek_ahead=bool(settings.player.allow_seek_ahead),
            **callbacks,
        )

    # ── state ────────────────────────────────────────────────────────────
    @property
    def state(self) -> SyncState:
        if self._ready and self._player is not None:
            return SyncState.READY
        return SyncState.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.state == SyncState.READY

    @property
    def is_alive(self) -> bool:
        return self._alive

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    @property
    def player(self) -> MediaPlayer | None:
        return self._player

    # ── lifecycle ────────────────────────────────────────────────────────
    async def start(self) -> bool:
        """Load the player API and create the player.

        Returns False (and records `last_error`) when loading fails; calling
        `start()` again retries.
        """
        if not self._alive:
            return False
        if self._player is not None:
            return True

        provider = str(getattr(self._loader, "provider", "unknown"))
        try:
            api = await self._loader.load()
        except Exception as exc:
            self._fail_start(provider, exc)
            return False

        if not self._alive:
            logger.debug("player api resolved after dispose (provider=%s)", provider)
            return False
        if self._player is not None:
            return True

        events = PlayerEvents(
            on_ready=self._handle_ready,
            on_state_change=self._handle_state_change,
            on_error=self._handle_player_error,
        )
        try:
            self._player = api.create_player(events)
        except Exception as exc:
            self._fail_start(provider, exc)
            return False

        self.last_error = None
        logger.info("player created (provider=%s)", provider)
        return True

    def _fail_start(self, provider: str, exc: Exception) -> None:
        error = exc if isinstance(exc, PlayerError) else PlayerLoadError(provider, str(exc))
        logger.exception("player initialization failed (provider=%s)", provider)
        self.last_error = error
        if self.on_error is not None:
            self.on_error(error)

    def dispose(self) -> None:
        """Cancel polling, destroy the player and drop ready state. Idempotent."""
        if not self._alive and self._player is None:
            return
        self._alive = False
        self._cancel_polling()
        player = self._player
        self._player = None
        self._ready = False
        if player is not None:
            try:
                player.destroy()
            except Exception:
                logger.exception("player destroy failed")
        logger.debug("synchronizer disposed")

    async def aclose(self) -> None:
        task = self._poll_task
        self.dispose()
        if task is not None and task is not asyncio.current_task():
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def __aenter__(self) -> "PlaybackSynchronizer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ── player callbacks ─────────────────────────────────────────────────
    def _handle_ready(self, player: MediaPlayer) -> None:
        if not self._alive or player is not self._player:
            return
        self._ready = True
        player.set_playback_rate(self._playback_rate)
        self._apply_video()
        duration = float(player.get_duration() or 0.0)
        logger.info("player ready (duration=%.2f, video_id=%s)", duration, self._video_id)
        if self.on_ready is not None:
            self.on_ready(duration)
        if not self.is_ready:
            return
        self._snap_to_loop_start()
        self._restart_polling()

    def _handle_state_change(self, code: int) -> None:
        if not self._alive:
            return
        if self.on_state_change is not None:
            self.on_state_change(int(code))

    def _handle_player_error(self, code: int) -> None:
        if not self._alive:
            return
        error = PlayerError(
            str(getattr(self._loader, "provider", "unknown")),
            f"player reported error code {code}",
            error_code=ErrorCode.PLAYER_FAILED,
        )
        logger.warning("player error (code=%s, video_id=%s)", code, self._video_id)
        self.last_error = error
        if self.on_error is not None:
            self.on_error(error)

    # ── inputs ───────────────────────────────────────────────────────────
    def set_video(self, video_id: str | None) -> None:
        video_id = video_id or None
        if video_id == self._video_id:
            return
        self._video_id = video_id
        if not self.is_ready:
            return
        self._apply_video()
        self._restart_polling()

    def set_loop_range(self, loop_range: LoopRange | None) -> None:
        previous = self._loop_range
        self._loop_range = loop_range
        if loop_range is not None and loop_range != previous:
            self._snap_to_loop_start()

    def set_looping(self, enabled: bool) -> None:
        was_looping = self._looping
        self._looping = bool(enabled)
        if self._looping and not was_looping:
            self._snap_to_loop_start()

    def set_playback_rate(self, rate: float) -> None:
        if float(rate) == self._playback_rate:
            return
        self._playback_rate = float(rate)
        if self._player is not None and self._ready:
            self._player.set_playback_rate(self._playback_rate)

    # ── player commands (no-ops without a ready player) ──────────────────
    def play(self) -> None:
        if self._player is not None and self._ready:
            self._player.play()

    def pause(self) -> None:
        if self._player is not None and self._ready:
            self._player.pause()

    def seek_to(self, seconds: float, allow_seek_ahead: bool | None = None) -> None:
        if self._player is None or not self._ready:
            return
        ahead = self._allow_seek_ahead if allow_seek_ahead is None else bool(allow_seek_ahead)
        self._player.seek_to(float(seconds), ahead)

    def current_time(self) -> float:
        if self._player is None:
            return 0.0
        return float(self._player.get_current_time() or 0.0)

    def duration(self) -> float:
        if self._player is None:
            return 0.0
        return float(self._player.get_duration() or 0.0)

    # ── polling ──────────────────────────────────────────────────────────
    def tick(self) -> bool:
        """Run one poll step. Returns True when a loop-back seek was issued."""
        player = self._player
        if player is None or not self._ready:
            return False

        current = float(player.get_current_time() or 0.0)
        duration = float(player.get_duration() or 0.0)
        if self.on_time_update is not None:
            self.on_time_update(current, duration)

        # The callback may have disposed us or swapped the range.
        player = self._player
        loop_range = self._loop_range
        if player is None or not self._looping or loop_range is None:
            return False
        if loop_range.end <= loop_range.start:
            return False
        if current >= loop_range.end - self._loop_threshold_s:
            logger.debug(
                "loop boundary reached (current=%.2f, start=%.2f, end=%.2f)",
                current,
                loop_range.start,
                loop_range.end,
            )
            player.seek_to(loop_range.start, self._allow_seek_ahead)
            return True
        return False

    async def _poll_loop(self) -> None:
        while self._alive:
            await asyncio.sleep(self._poll_interval_s)
            try:
                self.tick()
            except Exception:
                logger.exception("poll tick failed (video_id=%s)", self._video_id)

    def _restart_polling(self) -> None:
        self._cancel_polling()
        if not self._alive or not self.is_ready or self._video_id is None:
            return
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())

    def _cancel_polling(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            task.cancel()

    # ── helpers ──────────────────────────────────────────────────────────
    def _apply_video(self) -> None:
        player = self._player
        if player is None:
            return
        if self._video_id is None:
            player.stop()
            return
        loaded = (player.get_video_data() or {}).get("video_id")
        if loaded == self._video_id:
            return
        player.cue_video_by_id(self._video_id)
        logger.info("video cued (video_id=%s)", self._video_id)

    def _snap_to_loop_start(self) -> None:
        if self._player is None or not self._ready:
            return
        if not self._looping or self._loop_range is None:
            return
        self._player.seek_to(self._loop_range.start, self._allow_seek_ahead)
