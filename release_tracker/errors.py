"""Exception hierarchy for the tracker.

Only persistence problems are fatal to a scan; fetch, parse and
classification problems degrade to fewer candidates and never raise.
"""


class TrackerError(Exception):
    """Base exception for all release_tracker errors."""


class StorePersistenceError(TrackerError):
    """Raised when the item store or history log cannot be written."""

    def __init__(self, path: object, detail: str) -> None:
        self.path = path
        super().__init__(f"Could not persist {path}: {detail}")


class StoreCorruptedError(TrackerError):
    """Raised when a persisted document exists but cannot be parsed."""

    def __init__(self, path: object, detail: str) -> None:
        self.path = path
        super().__init__(f"Corrupted store document {path}: {detail}")


__all__ = ["StoreCorruptedError", "StorePersistenceError", "TrackerError"]
