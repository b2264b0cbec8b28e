"""Player loader factory and registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tubeloop.exceptions import ConfigurationError
from tubeloop.players.base import PlayerLoader


def get_player_loader(config: Mapping[str, Any]) -> PlayerLoader:
    """Get a player loader based on configuration."""
    provider_type = str(config.get("provider") or "simulated").strip().lower()

    match provider_type:
        case "simulated":
            from tubeloop.players.simulated import SimulatedPlayerLoader

            return SimulatedPlayerLoader(
                durations=dict(config.get("durations") or {}),
                default_duration_s=float(config.get("default_duration_s") or 0.0),
                load_delay_s=float(config.get("load_delay_s") or 0.0),
            )
        case _:
            raise ConfigurationError(f"Unknown player provider: {provider_type}")
