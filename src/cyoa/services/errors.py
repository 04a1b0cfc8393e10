"""Service-layer exceptions."""


class PlaybackError(Exception):
    """Base exception for playback session misuse."""


class InvalidStartReference(PlaybackError):
    """Raised when a story's start passage is not one of its passages."""

    def __init__(self, start: str) -> None:
        super().__init__(f'Start passage "{start}" not found in passages')
        self.start = start


class SessionNotLoadedError(PlaybackError):
    """Raised when navigation is attempted before a story is loaded."""


class GraphCompileError(Exception):
    """Raised when a builder graph cannot be compiled into a story document."""
