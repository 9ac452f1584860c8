# core/errors.py
from __future__ import annotations


class CloudMusicError(Exception):
    """Base class for every error raised by this package."""


class StartupError(CloudMusicError):
    """A required interactive-surface element is missing at construction time."""


class ChannelClosed(CloudMusicError):
    """The action channel was closed; no further actions can flow through it."""


class DispatcherInvariantError(CloudMusicError):
    """The dispatcher found its channel closed while it was not shutting down."""


class ApiError(CloudMusicError):
    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{msg} (code {self.code})" if self.code is not None else msg
