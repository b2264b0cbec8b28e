"""Playback synchronization."""

from tubeloop.playback.synchronizer import (
    LOOP_THRESHOLD_S,
    POLL_INTERVAL_S,
    PlaybackSynchronizer,
    SyncState,
)

__all__ = ["LOOP_THRESHOLD_S", "POLL_INTERVAL_S", "PlaybackSynchronizer", "SyncState"]
