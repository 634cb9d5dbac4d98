"""Exception hierarchy for cinelink_search."""

from __future__ import annotations


class CinelinkSearchError(Exception):
    """Base class for all errors raised by this package."""


class BackendError(CinelinkSearchError):
    """A remote search call failed.

    ``kind`` is one of ``"timeout"``, ``"network"`` or ``"api"``.
    """

    def __init__(self, message: str, *, kind: str = "api", status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class StorageError(CinelinkSearchError):
    """Durable storage could not be written."""
