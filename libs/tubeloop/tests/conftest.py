from __future__ import annotations

import pytest

from tubeloop.config import LinkConfig, PlayerConfig, SegmentConfig, Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        log_dir=str(tmp_path / "logs"),
        player=PlayerConfig(provider="simulated", poll_interval_ms=10, default_duration_s=120.0),
        segments=SegmentConfig(min_length_s=0.2, default_label_prefix="Loop"),
        links=LinkConfig(),
    )
