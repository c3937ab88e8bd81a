from dataclasses import replace

import pytest

from conftest import NOW, DeferredRunner, FakeNoteStore, make_note

from personal_notes.core.controller import (
    CREATE_FAILED,
    DELETE_FAILED,
    LOAD_FAILED,
    UPDATE_FAILED,
    NoteController,
    check_invariants,
)
from personal_notes.core.errors import SelectionInvariantViolation, ValidationError
from personal_notes.core.models import ControllerState


def assert_invariants(state: ControllerState):
    ids = [n.id for n in state.notes]
    assert state.selected_id is None or state.selected_id in ids
    assert not state.is_editing or state.edit_buffer is not None


def ids(c):
    return [n.id for n in c.notes]


# ───────────────────────── load / select ─────────────────────────

def test_initial_state_is_loading(controller):
    assert controller.loading
    assert controller.notes == ()
    assert controller.selected_id is None
    assert controller.error is None


def test_load_selects_newest(loaded):
    assert ids(loaded) == ["n1", "n2", "n3"]
    assert loaded.selected_id == "n1"
    assert loaded.edit_buffer.id == "n1"
    assert not loaded.is_editing
    assert not loaded.loading


def test_load_empty_store():
    c = NoteController(FakeNoteStore())
    c.load()
    assert c.notes == ()
    assert c.selected_id is None
    assert c.edit_buffer is None


def test_load_failure_keeps_notes(store, controller):
    store.fail_on.add("list")
    controller.load()
    assert controller.error == LOAD_FAILED
    assert not controller.loading
    assert controller.notes == ()


def test_reload_failure_keeps_previous_collection(store, loaded):
    store.fail_on.add("list")
    loaded.load()
    assert loaded.error == LOAD_FAILED
    assert ids(loaded) == ["n1", "n2", "n3"]


def test_load_clears_stale_error(store, controller):
    store.fail_on.add("list")
    controller.load()
    store.fail_on.clear()
    controller.load()
    assert controller.error is None
    assert controller.selected_id == "n1"


def test_unexpected_store_exception_becomes_error(store, controller):
    def boom():
        raise RuntimeError("socket closed")

    store.list = boom
    controller.load()
    assert controller.error == LOAD_FAILED


def test_duplicate_ids_from_store_become_load_error(store, controller):
    store.list = lambda: [make_note("n1"), make_note("n1", title="again")]
    controller.load()

    assert controller.error == LOAD_FAILED
    assert not controller.loading
    assert not controller.busy
    assert controller.notes == ()

    del store.list
    controller.load()
    assert controller.error is None
    assert controller.selected_id == "n1"


def test_select_exits_edit_mode_and_discards_draft(loaded):
    loaded.start_edit()
    loaded.change_field("title", "draft")
    loaded.select("n2")
    assert loaded.selected_id == "n2"
    assert not loaded.is_editing
    assert loaded.edit_buffer.id == "n2"
    assert loaded.edit_buffer.title == "N2"


def test_select_unknown_id_is_ignored(loaded):
    before = loaded.state
    loaded.select("missing")
    assert loaded.state is before


def test_select_none_clears(loaded):
    loaded.select(None)
    assert loaded.selected_id is None
    assert loaded.edit_buffer is None
    assert loaded.selected_note is None


# ───────────────────────── editing ─────────────────────────

def test_start_new_clears_selection(loaded):
    loaded.start_new()
    assert loaded.selected_id is None
    assert loaded.is_editing
    assert loaded.edit_buffer.id == ""


def test_start_edit_without_selection_is_noop():
    c = NoteController(FakeNoteStore())
    c.load()
    before = c.state
    c.start_edit()
    assert c.state is before


def test_change_field_requires_edit_mode(loaded):
    loaded.change_field("title", "ignored")
    assert loaded.edit_buffer.title == "N1"


def test_change_field_rejects_unknown_field(loaded):
    loaded.start_edit()
    with pytest.raises(ValueError):
        loaded.change_field("id", "x")


def test_create_note_scenario(store, loaded):
    loaded.start_new()
    loaded.change_field("title", "Groceries")
    loaded.change_field("content", "Milk, eggs")
    loaded.save()

    assert not loaded.is_editing
    assert loaded.edit_buffer is None
    assert loaded.notes[0].title == "Groceries"
    assert loaded.notes[0].content == "Milk, eggs"
    assert loaded.selected_id == loaded.notes[0].id
    assert loaded.notes[0].created == NOW
    assert not loaded.saving
    assert store.calls == ["list", "create"]


def test_save_then_load_round_trip():
    store = FakeNoteStore()
    c = NoteController(store, clock=lambda: NOW)
    c.load()
    c.start_new()
    c.change_field("title", "A")
    c.change_field("content", "B")
    c.save()

    c.load()
    assert [(n.title, n.content) for n in c.notes] == [("A", "B")]


def test_blank_title_saved_as_untitled(loaded):
    loaded.start_new()
    loaded.change_field("content", "  just text  ")
    loaded.save()
    assert loaded.notes[0].title == "Untitled"
    assert loaded.notes[0].content == "just text"


def test_validation_gate(store, loaded):
    loaded.start_new()
    before = loaded.state
    with pytest.raises(ValidationError):
        loaded.save()
    assert loaded.state is before
    assert not loaded.saving
    assert loaded.error is None
    assert store.calls == ["list"]


def test_create_failure_keeps_editor_open(store, loaded):
    store.fail_on.add("create")
    loaded.start_new()
    loaded.change_field("title", "Retry me")
    loaded.save()

    assert loaded.error == CREATE_FAILED
    assert loaded.is_editing
    assert loaded.edit_buffer.title == "Retry me"
    assert not loaded.saving
    assert ids(loaded) == ["n1", "n2", "n3"]

    store.fail_on.clear()
    loaded.save()
    assert loaded.error is None
    assert loaded.notes[0].title == "Retry me"


def test_update_keeps_position(loaded):
    loaded.select("n3")
    loaded.start_edit()
    loaded.change_field("title", "Renamed")
    loaded.save()

    assert ids(loaded) == ["n1", "n2", "n3"]
    assert loaded.notes[2].title == "Renamed"
    assert loaded.notes[2].updated == NOW
    assert loaded.selected_id == "n3"
    assert not loaded.is_editing
    assert loaded.edit_buffer is None


def test_failed_update_keeps_edit_open(store, loaded):
    store.fail_on.add("update")
    loaded.start_edit()
    loaded.change_field("content", "new text")
    loaded.save()

    assert loaded.is_editing
    assert loaded.error == UPDATE_FAILED
    assert loaded.edit_buffer.content == "new text"
    assert not loaded.saving
    assert loaded.notes[0].content == ""


def test_save_outside_edit_mode_does_nothing(store, loaded):
    loaded.save()
    assert store.calls == ["list"]


def test_cancel_restores_selected_note(loaded):
    loaded.start_edit()
    loaded.change_field("title", "scratch")
    loaded.cancel()
    assert not loaded.is_editing
    assert loaded.edit_buffer.title == "N1"


def test_cancel_while_creating(loaded):
    loaded.start_new()
    loaded.cancel()
    assert loaded.edit_buffer is None
    assert not loaded.is_editing
    assert loaded.selected_id is None


def test_cancel_is_idempotent(loaded):
    loaded.start_edit()
    loaded.change_field("content", "x")
    loaded.cancel()
    once = loaded.state
    loaded.cancel()
    assert loaded.state == once


def test_cancel_clears_error(store, loaded):
    store.fail_on.add("update")
    loaded.start_edit()
    loaded.change_field("content", "x")
    loaded.save()
    loaded.cancel()
    assert loaded.error is None


# ───────────────────────── delete ─────────────────────────

def test_delete_middle_selects_previous(loaded):
    loaded.select("n2")
    loaded.delete("n2")
    assert ids(loaded) == ["n1", "n3"]
    assert loaded.selected_id == "n1"
    assert not loaded.deleting


def test_delete_first_selects_next(loaded):
    loaded.delete("n1")
    assert loaded.selected_id == "n2"
    assert loaded.edit_buffer.id == "n2"


def test_delete_last_remaining_note():
    store = FakeNoteStore([make_note("only")])
    c = NoteController(store)
    c.load()
    c.delete("only")
    assert c.notes == ()
    assert c.selected_id is None
    assert c.edit_buffer is None


def test_delete_failure_leaves_collection(store, loaded):
    store.fail_on.add("delete")
    loaded.delete("n2")
    assert loaded.error == DELETE_FAILED
    assert ids(loaded) == ["n1", "n2", "n3"]
    assert loaded.selected_id == "n1"
    assert not loaded.deleting


def test_delete_unknown_note_is_an_error(loaded):
    loaded.delete("ghost")
    assert loaded.error == DELETE_FAILED


def test_delete_exits_edit_mode(loaded):
    loaded.start_edit()
    loaded.delete("n3")
    assert not loaded.is_editing
    assert loaded.selected_id == "n2"


# ───────────────────────── theme / busy / observers ─────────────────────────

def test_toggle_theme(loaded):
    assert loaded.theme == "light"
    loaded.toggle_theme()
    assert loaded.theme == "dark"
    loaded.toggle_theme()
    assert loaded.theme == "light"


def test_unknown_theme_falls_back_to_light(store):
    assert NoteController(store, theme="solarized").theme == "light"


def test_operations_wait_for_store_call(store):
    runner = DeferredRunner()
    c = NoteController(store, runner=runner, clock=lambda: NOW)
    c.load()
    assert c.loading and c.busy

    c.delete("n1")
    assert len(runner.pending) == 1
    runner.flush()
    assert not c.busy
    assert store.calls == ["list"]

    c.start_new()
    c.change_field("title", "Slow")
    c.save()
    assert c.saving
    assert c.is_editing
    c.load()
    assert len(runner.pending) == 1
    runner.flush()
    assert not c.saving
    assert c.notes[0].title == "Slow"
    assert store.calls == ["list", "create"]


def test_listeners_see_every_transition(store):
    c = NoteController(store)
    seen = []
    unsubscribe = c.subscribe(seen.append)
    c.load()
    assert seen[0].loading
    assert not seen[-1].loading
    unsubscribe()
    c.toggle_theme()
    assert seen[-1].theme == "light"


def test_listener_failure_does_not_break_controller(store):
    c = NoteController(store)

    def bad_listener(_state):
        raise RuntimeError("render failed")

    c.subscribe(bad_listener)
    c.load()
    assert c.selected_id == "n1"


def test_invariants_hold_across_a_session(store):
    c = NoteController(store, clock=lambda: NOW)
    c.subscribe(assert_invariants)
    c.load()
    c.select("n2")
    c.start_edit()
    c.change_field("title", "x")
    c.cancel()
    c.start_new()
    c.change_field("content", "y")
    c.save()
    store.fail_on.add("delete")
    c.delete(c.selected_id)
    store.fail_on.clear()
    c.delete(c.selected_id)
    c.delete("n1")
    c.delete("n2")
    c.delete("n3")
    assert c.notes == ()
    assert c.selected_id is None


def test_check_invariants_rejects_dangling_selection():
    with pytest.raises(SelectionInvariantViolation):
        check_invariants(ControllerState(notes=(make_note("n1"),), selected_id="n9"))


def test_check_invariants_rejects_editing_without_buffer():
    with pytest.raises(SelectionInvariantViolation):
        check_invariants(ControllerState(is_editing=True))


def test_check_invariants_rejects_duplicate_ids():
    note = make_note("n1")
    with pytest.raises(SelectionInvariantViolation):
        check_invariants(ControllerState(notes=(note, replace(note, title="dup"))))
