"""Logging initialization helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tubeloop.config import LoggingSettings, Settings

ROOT_LOGGER = "tubeloop"
PLAYBACK_LOGGER = "tubeloop.playback"


def _level(name: str | None, default: int = logging.INFO) -> int:
    value = getattr(logging, str(name or "").strip().upper(), None)
    return value if isinstance(value, int) else default


def _file_handler(cfg: LoggingSettings, log_dir: str) -> RotatingFileHandler:
    file_path = Path(str(cfg.file))
    if not file_path.is_absolute():
        file_path = Path(log_dir) / file_path
    file_path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        file_path,
        maxBytes=int(cfg.max_bytes),
        backupCount=int(cfg.backup_count),
        encoding="utf-8",
    )


def setup_logging(settings: Settings, *, force: bool = False) -> logging.Logger:
    """Configure the `tubeloop` logger tree from Settings.

    Runs once per process unless `force` is set. Framework loggers (uvicorn,
    fastapi) are left alone. `LOG_PLAYBACK_LEVEL` overrides the level of the
    synchronizer logger only.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if getattr(logger, "_tubeloop_configured", False) and not force:
        return logger

    cfg = settings.logging
    level = _level(cfg.level)
    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))

    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    if cfg.file:
        handlers.append(_file_handler(cfg, settings.log_dir))
    for handler in handlers:
        handler.setFormatter(formatter)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    playback = logging.getLogger(PLAYBACK_LOGGER)
    playback.setLevel(_level(cfg.playback_level, level) if cfg.playback_level else logging.NOTSET)

    setattr(logger, "_tubeloop_configured", True)
    return logger
