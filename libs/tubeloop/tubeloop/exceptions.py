"""TubeLoop exception hierarchy."""

from __future__ import annotations

from tubeloop.error_codes import ErrorCode


class TubeLoopError(Exception):
    """Base error for TubeLoop."""


class ConfigurationError(TubeLoopError):
    """Raised when configuration is invalid."""


class InvalidInputError(TubeLoopError):
    """Raised when user-entered text cannot be understood."""

    def __init__(
        self,
        field: str,
        message: str,
        *,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.error_code = error_code


class PlayerError(TubeLoopError):
    """Raised when the hosting player environment fails."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.error_code = error_code


class PlayerLoadError(PlayerError):
    """Raised when the player API cannot be loaded or initialized."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(provider, message, error_code=ErrorCode.PLAYER_LOAD_FAILED)
