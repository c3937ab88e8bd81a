from __future__ import annotations


class NotesError(Exception):
    """Base class for every error the notes client raises on purpose."""


class ConfigurationError(NotesError):
    """Store credentials are missing; the app cannot start normally."""

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()):
        super().__init__(message)
        self.missing = missing


class ValidationError(NotesError):
    """The edit buffer cannot be saved as-is (nothing to save)."""


class StoreError(NotesError):
    """Any failure reported by a NoteStore operation."""


class SelectionInvariantViolation(NotesError):
    """Controller produced a state that breaks selection/editing invariants."""
