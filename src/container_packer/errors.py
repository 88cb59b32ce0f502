"""Errors raised by the packing engine and the session."""

from __future__ import annotations


class PackingError(ValueError):
    """Base class for recoverable packing failures."""

    reason = "packing error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.reason)


class InvalidDimensionsError(PackingError):
    """Dimensions are non-numeric, non-finite or not strictly positive."""

    reason = "invalid dimensions"


class ExceedsContainerError(PackingError):
    """A box dimension is larger than the matching container dimension."""

    reason = "exceeds container limits"


class NoSpaceError(PackingError):
    """No legal position exists for the requested box."""

    reason = "no space available"


class UnknownContainerError(PackingError):
    reason = "unknown container"


class UnknownBoxError(KeyError):
    """No box with the given id in the session."""

    reason = "unknown box"
