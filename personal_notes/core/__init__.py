from .controller import NoteController
from .edit_buffer import EditBuffer
from .errors import (
    ConfigurationError,
    NotesError,
    SelectionInvariantViolation,
    StoreError,
    ValidationError,
)
from .models import ControllerState, Note

__all__ = ["NoteController",
           "EditBuffer",
           "ConfigurationError",
           "NotesError",
           "SelectionInvariantViolation",
           "StoreError",
           "ValidationError",
           "ControllerState",
           "Note",
           ]
