from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from personal_notes.core.edit_buffer import EditBuffer


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str
    created: datetime
    updated: datetime


@dataclass(frozen=True)
class ControllerState:
    """Complete session-local state of the notes UI."""
    notes: tuple[Note, ...] = ()
    selected_id: str | None = None
    edit_buffer: EditBuffer | None = None
    is_editing: bool = False
    loading: bool = True
    saving: bool = False
    deleting: bool = False
    error: str | None = None
    theme: str = "light"

    @property
    def busy(self) -> bool:
        return self.loading or self.saving or self.deleting

    @property
    def selected_note(self) -> Note | None:
        return find_note(self.notes, self.selected_id)


def find_note(notes, note_id: str | None) -> Note | None:
    if note_id is None:
        return None
    for n in notes:
        if n.id == note_id:
            return n
    return None
