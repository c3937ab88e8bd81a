from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING

from personal_notes.core.errors import ValidationError

if TYPE_CHECKING:
    from personal_notes.core.models import Note

EDITABLE_FIELDS = ("title", "content")
UNTITLED = "Untitled"
EMPTY_NOTE_MESSAGE = "Please enter a title or content."


@dataclass(frozen=True)
class EditBuffer:
    """
    Draft of a note under edit.

    id == "" means the draft is a new note that the store has not seen yet.
    """
    id: str = ""
    title: str = ""
    content: str = ""
    created: datetime | None = None
    updated: datetime | None = None


def start_new() -> EditBuffer:
    return EditBuffer()


def start_edit(note: Note) -> EditBuffer:
    return EditBuffer(
        id=note.id,
        title=note.title,
        content=note.content,
        created=note.created,
        updated=note.updated,
    )


def set_field(buffer: EditBuffer, field: str, value: str) -> EditBuffer:
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Field is not editable: {field!r}")
    return replace(buffer, **{field: value})


def is_new(buffer: EditBuffer) -> bool:
    return buffer.id == ""


def validate(buffer: EditBuffer | None) -> tuple[str, str]:
    """
    Return (title, content) ready to be stored.

    Both values are stripped; a blank title becomes "Untitled".
    Raises ValidationError when there is nothing to save.
    """
    title = (buffer.title if buffer else "").strip()
    content = (buffer.content if buffer else "").strip()
    if not title and not content:
        raise ValidationError(EMPTY_NOTE_MESSAGE)
    return title or UNTITLED, content
