"""Live playback state mirrored from the player."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PlaybackState:
    current_time: float = 0.0
    duration: float = 0.0
    is_playing: bool = False
    playback_rate: float = 1.0
    looping_enabled: bool = True

    @property
    def progress_percent(self) -> float:
        if self.duration <= 0:
            return 0.0
        return min(100.0, max(0.0, self.current_time / self.duration * 100.0))

    def reset_position(self) -> None:
        """Forget position, duration and play flag (new media loaded)."""
        self.current_time = 0.0
        self.duration = 0.0
        self.is_playing = False
