"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tubeloop.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _resolve_repo_path(value: str) -> str:
    raw = str(value or "").strip()
    if not raw:
        return raw
    p = Path(raw)
    if p.is_absolute():
        return str(p)
    return str((_REPO_ROOT / p).resolve())


class PlayerConfig(BaseSettings):
    """Embedded player and synchronizer configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PLAYER_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "simulated"
    poll_interval_ms: int = Field(default=250, ge=10)
    # Early-seek margin absorbing poll jitter and seek latency.
    loop_threshold_s: float = Field(default=0.15, ge=0)
    allow_seek_ahead: bool = True
    # Simulated player only: duration used for ids without a known length.
    default_duration_s: float = Field(default=0.0, ge=0)


class SegmentConfig(BaseSettings):
    """Loop segment rules."""

    model_config = SettingsConfigDict(
        env_prefix="SEGMENT_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    min_length_s: float = Field(default=0.2, gt=0)
    default_label_prefix: str = "Loop"

    @model_validator(mode="after")
    def _validate_prefix(self) -> "SegmentConfig":
        if not str(self.default_label_prefix or "").strip():
            raise ConfigurationError("SEGMENT_DEFAULT_LABEL_PREFIX must not be blank")
        return self


class LinkConfig(BaseSettings):
    """Share link and address-bar parameters."""

    model_config = SettingsConfigDict(
        env_prefix="LINK_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    watch_url: str = "https://www.youtube.com/watch"
    video_param: str = "video"
    segments_param: str = "segments"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)
    # Poll ticks log every interval at DEBUG; tune them apart from the rest.
    playback_level: str | None = None


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    log_dir: str = "./logs"
    playback_rates: tuple[float, ...] = (0.5, 0.75, 1.0, 1.25, 1.5, 1.75, 2.0)

    # Player
    player: PlayerConfig = PlayerConfig()

    # Segments
    segments: SegmentConfig = SegmentConfig()

    # Links
    links: LinkConfig = LinkConfig()

    # Logging
    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        # Running apps from apps/* changes CWD; keep paths stable.
        self.log_dir = _resolve_repo_path(self.log_dir)
        if not self.playback_rates or any(float(r) <= 0 for r in self.playback_rates):
            raise ConfigurationError("PLAYBACK_RATES must be a non-empty list of positive numbers")
        return self

    @property
    def poll_interval_s(self) -> float:
        return float(self.player.poll_interval_ms) / 1000.0

    def player_config(self) -> dict[str, Any]:
        """Return a player config dict for the player registry."""
        cfg = self.player.model_dump()
        provider = str(cfg.get("provider") or "").strip().lower()
        if not provider:
            raise ConfigurationError("PLAYER_PROVIDER is not configured")
        cfg["provider"] = provider
        return cfg
