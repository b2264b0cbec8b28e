"""Clock-driven player used for local sessions and tests.

The play head advances with the clock times the playback rate while playing
and stops at the media duration (state ENDED). The ready event is dispatched
on the next loop iteration after creation; state changes are reported
synchronously.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from tubeloop.players.base import MediaPlayer, PlayerAPI, PlayerEvents, PlayerLoader, PlayerState

logger = logging.getLogger("tubeloop.players")


class SimulatedPlayer(MediaPlayer):
    def __init__(
        self,
        events: PlayerEvents,
        *,
        durations: Mapping[str, float] | None = None,
        default_duration_s: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._events = events
        self._durations = {str(k): float(v) for k, v in dict(durations or {}).items()}
        self._default_duration_s = float(default_duration_s)
        self._clock = clock

        self._video_id: str | None = None
        self._duration = 0.0
        self._position = 0.0
        self._anchor = clock()
        self._rate = 1.0
        self._state = PlayerState.UNSTARTED
        self._destroyed = False

    @property
    def state(self) -> PlayerState:
        self._advance()
        return self._state

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    # ── internals ───────────────────────────────────────────────────────
    def _set_state(self, state: PlayerState) -> None:
        if state == self._state:
            return
        self._state = state
        callback = self._events.on_state_change
        if callback is not None:
            callback(int(state))

    def _advance(self) -> None:
        now = self._clock()
        if self._state == PlayerState.PLAYING:
            self._position += (now - self._anchor) * self._rate
            if self._duration > 0 and self._position >= self._duration:
                self._position = self._duration
                self._set_state(PlayerState.ENDED)
        self._anchor = now

    def _clamp(self, seconds: float) -> float:
        value = max(0.0, float(seconds))
        if self._duration > 0:
            value = min(value, self._duration)
        return value

    def _dispatch_ready(self) -> None:
        if self._destroyed:
            return
        callback = self._events.on_ready
        if callback is not None:
            callback(self)

    # ── MediaPlayer ─────────────────────────────────────────────────────
    def play(self) -> None:
        if self._destroyed or self._video_id is None:
            return
        self._advance()
        if self._state == PlayerState.ENDED:
            self._position = 0.0
        self._set_state(PlayerState.PLAYING)

    def pause(self) -> None:
        if self._destroyed:
            return
        self._advance()
        if self._state in (PlayerState.PLAYING, PlayerState.BUFFERING):
            self._set_state(PlayerState.PAUSED)

    def stop(self) -> None:
        if self._destroyed:
            return
        self._advance()
        self._position = 0.0
        self._set_state(PlayerState.UNSTARTED)

    def seek_to(self, seconds: float, allow_seek_ahead: bool = True) -> None:  # noqa: ARG002
        if self._destroyed or self._video_id is None:
            return
        self._advance()
        self._position = self._clamp(seconds)
        if self._state == PlayerState.ENDED and (
            self._duration <= 0 or self._position < self._duration
        ):
            self._set_state(PlayerState.PAUSED)

    def set_playback_rate(self, rate: float) -> None:
        if self._destroyed or float(rate) <= 0:
            return
        self._advance()
        self._rate = float(rate)

    def get_playback_rate(self) -> float:
        return self._rate

    def get_current_time(self) -> float:
        self._advance()
        return self._position

    def get_duration(self) -> float:
        return self._duration

    def get_video_data(self) -> dict[str, Any]:
        if self._video_id is None:
            return {}
        return {"video_id": self._video_id}

    def cue_video_by_id(self, video_id: str, start_seconds: float = 0.0) -> None:
        if self._destroyed:
            return
        self._advance()
        self._video_id = str(video_id)
        self._duration = self._durations.get(self._video_id, self._default_duration_s)
        self._position = self._clamp(start_seconds)
        self._set_state(PlayerState.CUED)

    def load_video_by_id(self, video_id: str, start_seconds: float = 0.0) -> None:
        self.cue_video_by_id(video_id, start_seconds)
        self.play()

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._advance()
        self._destroyed = True
        self._events = PlayerEvents()


class SimulatedPlayerAPI(PlayerAPI):
    provider = "simulated"

    def __init__(
        self,
        *,
        durations: Mapping[str, float] | None = None,
        default_duration_s: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._durations = dict(durations or {})
        self._default_duration_s = float(default_duration_s)
        self._clock = clock

    def create_player(self, events: PlayerEvents) -> SimulatedPlayer:
        player = SimulatedPlayer(
            events,
            durations=self._durations,
            default_duration_s=self._default_duration_s,
            clock=self._clock,
        )
        asyncio.get_running_loop().call_soon(player._dispatch_ready)
        return player


class SimulatedPlayerLoader(PlayerLoader):
    provider = "simulated"

    def __init__(
        self,
        *,
        durations: Mapping[str, float] | None = None,
        default_duration_s: float = 0.0,
        clock: Callable[[], float] | None = None,
        load_delay_s: float = 0.0,
    ) -> None:
        super().__init__()
        self._durations = dict(durations or {})
        self._default_duration_s = float(default_duration_s)
        self._clock = clock or time.monotonic
        self._load_delay_s = max(0.0, float(load_delay_s))

    async def _load(self) -> SimulatedPlayerAPI:
        if self._load_delay_s:
            await asyncio.sleep(self._load_delay_s)
        logger.debug(
            "simulated player api loaded (known_videos=%d, default_duration_s=%.2f)",
            len(self._durations),
            self._default_duration_s,
        )
        return SimulatedPlayerAPI(
            durations=self._durations,
            default_duration_s=self._default_duration_s,
            clock=self._clock,
        )
