from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from personal_notes.core import edit_buffer, selection
from personal_notes.core.edit_buffer import EditBuffer
from personal_notes.core.errors import SelectionInvariantViolation, StoreError
from personal_notes.core.models import ControllerState, Note, find_note
from personal_notes.core.tasks import InlineRunner, TaskRunner
from personal_notes.settings import APP_NAME, normalize_theme

LOAD_FAILED = "Could not load notes."
CREATE_FAILED = "Failed to create note."
UPDATE_FAILED = "Failed to update note."
DELETE_FAILED = "Unable to delete note."

Listener = Callable[[ControllerState], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def check_invariants(state: ControllerState) -> None:
    ids = [n.id for n in state.notes]
    if len(set(ids)) != len(ids):
        raise SelectionInvariantViolation("Duplicate note ids in collection")
    if state.selected_id is not None and state.selected_id not in ids:
        raise SelectionInvariantViolation(
            f"selected_id={state.selected_id!r} is not in the collection"
        )
    if state.is_editing and state.edit_buffer is None:
        raise SelectionInvariantViolation("is_editing is set without an edit buffer")


def with_selection(state: ControllerState, note_id: str | None) -> ControllerState:
    """Select a note: the buffer becomes a fresh copy of it and editing ends."""
    note = find_note(state.notes, note_id)
    return replace(
        state,
        selected_id=note.id if note else None,
        edit_buffer=edit_buffer.start_edit(note) if note else None,
        is_editing=False,
    )


class NoteController:
    """
    Owns the notes UI state and keeps it in sync with a NoteStore.

    Every operation is a synchronous state transition, except that store calls
    go through the runner; their results are applied when the call settles.
    Store failures never escape: they become one fixed message in `error`.
    Only one store call is in flight at a time.
    """

    def __init__(
        self,
        store,
        *,
        runner: TaskRunner | None = None,
        clock: Callable[[], datetime] | None = None,
        theme: str = "light",
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self._store = store
        self._runner = runner or InlineRunner()
        self._clock = clock or utc_now
        self._log = logger or logging.getLogger(APP_NAME)
        self._state = ControllerState(theme=normalize_theme(theme))
        self._listeners: list[Listener] = []
        self._in_flight: str | None = None

    # ───────────────────────── state access ─────────────────────────

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._state.notes

    @property
    def selected_id(self) -> str | None:
        return self._state.selected_id

    @property
    def selected_note(self) -> Note | None:
        return self._state.selected_note

    @property
    def edit_buffer(self) -> EditBuffer | None:
        return self._state.edit_buffer

    @property
    def is_editing(self) -> bool:
        return self._state.is_editing

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def saving(self) -> bool:
        return self._state.saving

    @property
    def deleting(self) -> bool:
        return self._state.deleting

    @property
    def busy(self) -> bool:
        return self._state.busy

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def theme(self) -> str:
        return self._state.theme

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ───────────────────────── user intents ─────────────────────────

    def load(self) -> None:
        if not self._begin("load"):
            return
        self._commit(replace(self._state, loading=True, error=None))
        self._runner.submit(
            self._store.list,
            on_success=self._on_loaded,
            on_failure=self._on_load_failed,
        )

    def select(self, note_id: str | None) -> None:
        if note_id is not None and find_note(self._state.notes, note_id) is None:
            self._log.warning("Ignoring selection of unknown note: id=%s", note_id)
            return
        state = replace(self._state, error=None)
        self._commit(with_selection(state, selection.on_select(note_id)))

    def start_new(self) -> None:
        self._commit(replace(
            self._state,
            edit_buffer=edit_buffer.start_new(),
            is_editing=True,
            selected_id=None,
            error=None,
        ))

    def start_edit(self) -> None:
        note = self._state.selected_note
        if note is None:
            return
        self._commit(replace(
            self._state,
            edit_buffer=edit_buffer.start_edit(note),
            is_editing=True,
            error=None,
        ))

    def change_field(self, field: str, value: str) -> None:
        st = self._state
        if not st.is_editing or st.edit_buffer is None:
            self._log.debug("change_field(%s) ignored: not editing", field)
            return
        self._commit(replace(st, edit_buffer=edit_buffer.set_field(st.edit_buffer, field, value)))

    def save(self) -> None:
        """
        Persist the edit buffer.

        Raises ValidationError (before touching any state) when the buffer
        has neither title nor content; the caller is expected to prompt.
        """
        st = self._state
        if not st.is_editing or st.edit_buffer is None:
            self._log.debug("save ignored: not editing")
            return
        title, content = edit_buffer.validate(st.edit_buffer)
        if not self._begin("save"):
            return

        buf = st.edit_buffer
        now = self._clock()
        self._commit(replace(st, saving=True, error=None))

        if edit_buffer.is_new(buf):
            fields = {"title": title, "content": content, "created": now, "updated": now}
            self._runner.submit(
                lambda: self._store.create(fields),
                on_success=self._on_created,
                on_failure=self._on_create_failed,
            )
        else:
            note_id = buf.id
            fields = {"title": title, "content": content, "updated": now}
            self._runner.submit(
                lambda: self._store.update(note_id, fields),
                on_success=self._on_updated,
                on_failure=self._on_update_failed,
            )

    def cancel(self) -> None:
        st = self._state
        note = st.selected_note
        self._commit(replace(
            st,
            edit_buffer=edit_buffer.start_edit(note) if note else None,
            is_editing=False,
            error=None,
        ))

    def delete(self, note_id: str) -> None:
        """Delete a note. Confirmation is the caller's job."""
        if not self._begin("delete"):
            return
        self._commit(replace(self._state, deleting=True, error=None))
        self._runner.submit(
            lambda: self._store.delete(note_id),
            on_success=lambda _res: self._on_deleted(note_id),
            on_failure=self._on_delete_failed,
        )

    def toggle_theme(self) -> None:
        theme = "dark" if self._state.theme == "light" else "light"
        self._commit(replace(self._state, theme=theme))

    # ───────────────────────── store results ─────────────────────────

    def _on_loaded(self, notes) -> None:
        notes = tuple(notes)
        if len({n.id for n in notes}) != len(notes):
            self._on_load_failed(StoreError("Store returned duplicate note ids"))
            return
        self._in_flight = None
        state = replace(self._state, notes=notes, loading=False)
        self._commit(with_selection(state, selection.after_load(notes)))
        self._log.info("Notes loaded: count=%d", len(notes))

    def _on_load_failed(self, exc: BaseException) -> None:
        self._in_flight = None
        self._log_store_failure("list", exc)
        self._commit(replace(self._state, loading=False, error=LOAD_FAILED))

    def _on_created(self, note: Note) -> None:
        self._in_flight = None
        st = self._state
        notes = (note,) + tuple(n for n in st.notes if n.id != note.id)
        self._commit(replace(
            st,
            notes=notes,
            selected_id=note.id,
            is_editing=False,
            edit_buffer=None,
            saving=False,
        ))
        self._log.info("Note created: id=%s", note.id)

    def _on_create_failed(self, exc: BaseException) -> None:
        self._in_flight = None
        self._log_store_failure("create", exc)
        self._commit(replace(self._state, saving=False, error=CREATE_FAILED))

    def _on_updated(self, note: Note) -> None:
        self._in_flight = None
        st = self._state
        # position is kept; the list is only re-sorted on load
        notes = tuple(note if n.id == note.id else n for n in st.notes)
        self._commit(replace(
            st,
            notes=notes,
            is_editing=False,
            edit_buffer=None,
            saving=False,
        ))
        self._log.info("Note updated: id=%s", note.id)

    def _on_update_failed(self, exc: BaseException) -> None:
        self._in_flight = None
        self._log_store_failure("update", exc)
        self._commit(replace(self._state, saving=False, error=UPDATE_FAILED))

    def _on_deleted(self, note_id: str) -> None:
        self._in_flight = None
        st = self._state
        before = st.notes
        after = tuple(n for n in before if n.id != note_id)
        state = replace(st, notes=after, deleting=False)
        self._commit(with_selection(state, selection.after_delete(before, note_id, after)))
        self._log.info("Note deleted: id=%s remaining=%d", note_id, len(after))

    def _on_delete_failed(self, exc: BaseException) -> None:
        self._in_flight = None
        self._log_store_failure("delete", exc)
        self._commit(replace(self._state, deleting=False, error=DELETE_FAILED))

    # ───────────────────────── internal ─────────────────────────

    def _begin(self, op: str) -> bool:
        if self._in_flight is not None:
            self._log.warning("Ignoring %s: %s is still in flight", op, self._in_flight)
            return False
        self._in_flight = op
        return True

    def _commit(self, state: ControllerState) -> None:
        check_invariants(state)
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                self._log.exception("State listener failed")

    def _log_store_failure(self, op: str, exc: BaseException) -> None:
        if isinstance(exc, StoreError):
            self._log.warning("Store %s failed: %s", op, exc)
        else:
            self._log.error("Store %s failed unexpectedly", op, exc_info=exc)
