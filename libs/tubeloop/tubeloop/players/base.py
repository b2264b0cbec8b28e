"""Embeddable media player contract."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class PlayerState(IntEnum):
    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


def is_playing_state(code: int) -> bool:
    return code in (PlayerState.PLAYING, PlayerState.BUFFERING)


@dataclass
class PlayerEvents:
    """Callbacks a player dispatches on its owner's event loop."""

    on_ready: Callable[["MediaPlayer"], None] | None = None
    on_state_change: Callable[[int], None] | None = None
    on_error: Callable[[int], None] | None = None


class MediaPlayer(ABC):
    """A live embedded player instance."""

    @abstractmethod
    def play(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def seek_to(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        ...

    @abstractmethod
    def set_playback_rate(self, rate: float) -> None:
        ...

    @abstractmethod
    def get_playback_rate(self) -> float:
        ...

    @abstractmethod
    def get_current_time(self) -> float:
        ...

    @abstractmethod
    def get_duration(self) -> float:
        ...

    @abstractmethod
    def get_video_data(self) -> dict[str, Any]:
        """Return metadata of the loaded media (at least `video_id` when loaded)."""

    @abstractmethod
    def cue_video_by_id(self, video_id: str, start_seconds: float = 0.0) -> None:
        """Load media without starting playback."""

    @abstractmethod
    def load_video_by_id(self, video_id: str, start_seconds: float = 0.0) -> None:
        """Load media and start playback."""

    @abstractmethod
    def destroy(self) -> None:
        ...


class PlayerAPI(ABC):
    """Player factory exposed once the hosting API has loaded."""

    provider: str

    @abstractmethod
    def create_player(self, events: PlayerEvents) -> MediaPlayer:
        ...


class PlayerLoader(ABC):
    """One-time asynchronous loader for a player API.

    Concurrent and repeated `load()` calls share one in-flight attempt. A
    failed attempt is forgotten so the next call retries.
    """

    provider: str = "unknown"

    def __init__(self) -> None:
        self._task: asyncio.Task[PlayerAPI] | None = None

    @abstractmethod
    async def _load(self) -> PlayerAPI:
        ...

    async def load(self) -> PlayerAPI:
        task = self._task
        if task is None:
            task = asyncio.ensure_future(self._load())
            self._task = task
        try:
            return await asyncio.shield(task)
        except BaseException:
            failed = task.done() and (task.cancelled() or task.exception() is not None)
            if failed and self._task is task:
                self._task = None
            raise
