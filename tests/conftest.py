import os
import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from personal_notes.core.controller import NoteController
from personal_notes.core.errors import StoreError
from personal_notes.core.models import Note
from personal_notes.core.tasks import InlineRunner

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
NOW = BASE + timedelta(hours=1)


def make_note(note_id: str, minutes_ago: int = 0, *, title: str | None = None, content: str = "") -> Note:
    ts = BASE - timedelta(minutes=minutes_ago)
    return Note(id=note_id, title=title or note_id.upper(), content=content, created=ts, updated=ts)


class FakeNoteStore:
    """In-memory NoteStore; put an operation name into fail_on to make it raise."""

    def __init__(self, notes=()):
        self.records = {n.id: n for n in notes}
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self._seq = 0

    def _enter(self, op: str) -> None:
        self.calls.append(op)
        if op in self.fail_on:
            raise StoreError(f"{op} failed")

    def list(self):
        self._enter("list")
        return sorted(self.records.values(), key=lambda n: n.updated, reverse=True)

    def create(self, fields):
        self._enter("create")
        self._seq += 1
        note = Note(
            id=f"new-{self._seq}",
            title=fields["title"],
            content=fields["content"],
            created=fields["created"],
            updated=fields["updated"],
        )
        self.records[note.id] = note
        return note

    def update(self, note_id, fields):
        self._enter("update")
        if note_id not in self.records:
            raise StoreError(f"Note not found: {note_id}")
        note = replace(
            self.records[note_id],
            title=fields["title"],
            content=fields["content"],
            updated=fields["updated"],
        )
        self.records[note_id] = note
        return note

    def delete(self, note_id):
        self._enter("delete")
        if note_id not in self.records:
            raise StoreError(f"Note not found: {note_id}")
        del self.records[note_id]


class DeferredRunner:
    """Holds store calls until flush(), like a slow network."""

    def __init__(self):
        self.pending = []

    def submit(self, call, *, on_success, on_failure):
        self.pending.append((call, on_success, on_failure))

    def flush(self):
        inline = InlineRunner()
        while self.pending:
            call, on_success, on_failure = self.pending.pop(0)
            inline.submit(call, on_success=on_success, on_failure=on_failure)


@pytest.fixture
def qapp():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])


@pytest.fixture
def three_notes():
    # newest first: n1, n2, n3
    return [make_note("n1", 0), make_note("n2", 10), make_note("n3", 20)]


@pytest.fixture
def store(three_notes):
    return FakeNoteStore(three_notes)


@pytest.fixture
def controller(store):
    return NoteController(store, clock=lambda: NOW)


@pytest.fixture
def loaded(controller):
    controller.load()
    return controller
