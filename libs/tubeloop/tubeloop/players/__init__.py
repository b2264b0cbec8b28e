"""Embeddable player abstractions."""

from tubeloop.players.base import (
    MediaPlayer,
    PlayerAPI,
    PlayerEvents,
    PlayerLoader,
    PlayerState,
    is_playing_state,
)
from tubeloop.players.registry import get_player_loader

__all__ = [
    "MediaPlayer",
    "PlayerAPI",
    "PlayerEvents",
    "PlayerLoader",
    "PlayerState",
    "get_player_loader",
    "is_playing_state",
]
