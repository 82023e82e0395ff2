from __future__ import annotations

from enum import Enum


class Outcome(Enum):
    """Result of a local state operation."""

    APPLIED = "applied"
    NOOP = "noop"
    NOT_FOUND = "not_found"

    @property
    def changed(self) -> bool:
        return self is Outcome.APPLIED


class LibraryError(Exception):
    pass


class DuplicateTagError(LibraryError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Tag already exists: {name}")
        self.name = name


class NotFoundError(LibraryError):
    def __init__(self, what: str, key: str) -> None:
        super().__init__(f"{what} not found: {key}")
        self.what = what
        self.key = key


class StoreError(LibraryError):
    """Raised by store implementations when a call cannot complete."""


class ExternalFailure(LibraryError):
    """A store call failed after the local change was already applied."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
