"""Base exception class for all compass-specific errors."""


class CompassError(Exception):
    """Base class for all compass errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
