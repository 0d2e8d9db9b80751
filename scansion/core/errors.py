"""Exception taxonomy shared by the scansion components."""

from __future__ import annotations


class ScansionError(Exception):
    """Base class for every error raised by :mod:`scansion`."""


class DictionaryLoadError(ScansionError):
    """Raised when the pronouncing dictionary cannot be read or parsed."""


class StoreNotInitializedError(ScansionError):
    """Raised when a lookup runs before the pronunciation store is ready."""

    def __init__(self, message: str = "Pronunciation store not initialized") -> None:
        super().__init__(message)


class StoreWriteError(ScansionError):
    """Raised when the pronunciation map would be written a second time."""


__all__ = [
    "ScansionError",
    "DictionaryLoadError",
    "StoreNotInitializedError",
    "StoreWriteError",
]
