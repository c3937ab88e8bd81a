"""Which note is selected after the collection changes.

Pure functions over sequences of notes (anything with an ``id``).
"""
from __future__ import annotations

from typing import Sequence

from personal_notes.core.models import Note


def after_load(notes: Sequence[Note]) -> str | None:
    # list() already returns newest first
    return notes[0].id if notes else None


def after_delete(
    notes_before: Sequence[Note],
    deleted_id: str,
    notes_after: Sequence[Note],
) -> str | None:
    """
    Keep the visual position stable: prefer the note just above the deleted
    one, otherwise fall back to the top of the list.
    """
    if not notes_after:
        return None

    remaining = {n.id for n in notes_after}
    idx = next((i for i, n in enumerate(notes_before) if n.id == deleted_id), -1)
    if idx > 0:
        prev_id = notes_before[idx - 1].id
        if prev_id in remaining:
            return prev_id
    return notes_after[0].id


def on_select(note_id: str | None) -> str | None:
    return note_id
