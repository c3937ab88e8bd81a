from __future__ import annotations

import logging

from PySide6.QtCore import QSettings, Qt
from PySide6.QtWidgets import (
    QApplication, QHBoxLayout, QLabel, QLineEdit, QListWidget, QListWidgetItem,
    QMainWindow, QPlainTextEdit, QPushButton, QSplitter, QStackedWidget,
    QTextBrowser, QToolButton, QVBoxLayout, QWidget,
)

from personal_notes.core.controller import NoteController
from personal_notes.core.errors import ValidationError
from personal_notes.core.models import ControllerState, Note
from personal_notes.services.markdown_renderer import MarkdownRenderer
from personal_notes.settings import APP_NAME, SettingsKeys
from personal_notes.ui.dialogs import confirm_delete, warn_invalid_note
from personal_notes.ui.qt_utils import blocked_signals, get_sizes, safe_set_setting
from personal_notes.ui.theme import stylesheet_for, toggle_label

log = logging.getLogger(APP_NAME)

_VIEWER, _EDITOR = 0, 1


def format_updated(note: Note) -> str:
    return note.updated.astimezone().strftime("%Y-%m-%d %H:%M")


class NoteRow(QWidget):
    """List row: title, last update and a delete button."""

    def __init__(self, note: Note, *, on_delete):
        super().__init__()
        title = QLabel(note.title)
        meta = QLabel(format_updated(note))
        meta.setObjectName("meta")

        self.delete_btn = QToolButton()
        self.delete_btn.setText("🗑")
        self.delete_btn.setObjectName("danger")
        self.delete_btn.setToolTip("Delete note")
        self.delete_btn.clicked.connect(lambda: on_delete(note))

        text = QVBoxLayout()
        text.setContentsMargins(0, 0, 0, 0)
        text.addWidget(title)
        text.addWidget(meta)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)
        layout.addLayout(text, 1)
        layout.addWidget(self.delete_btn)


class NotesWindow(QMainWindow):
    """
    Presentation layer: renders ControllerState and forwards user intents.

    All note logic lives in NoteController; this class only maps widgets
    to controller calls and back.
    """

    def __init__(self, *, controller: NoteController, settings: QSettings):
        super().__init__()
        self.setWindowTitle("Personal Notes")
        self._controller = controller
        self._settings = settings
        self._renderer = MarkdownRenderer()
        self._notes_shown: tuple[Note, ...] | None = None
        self._rows: list[NoteRow] = []
        self._theme_applied: str | None = None

        # header
        title = QLabel("📝 Personal Notes")
        font = title.font()
        font.setPointSize(font.pointSize() + 3)
        font.setBold(True)
        title.setFont(font)
        self.new_btn = QPushButton("+ New Note")
        self.new_btn.setObjectName("primary")
        self.theme_btn = QPushButton()

        header = QHBoxLayout()
        header.addWidget(title)
        header.addStretch(1)
        header.addWidget(self.new_btn)
        header.addWidget(self.theme_btn)

        # left: note list
        self.listw = QListWidget()
        self.empty_label = QLabel("No notes yet.")
        self.empty_label.setAlignment(Qt.AlignCenter)
        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.addWidget(self.listw)
        left_layout.addWidget(self.empty_label)

        # right: viewer / editor
        self.view_title = QLabel()
        vfont = self.view_title.font()
        vfont.setPointSize(vfont.pointSize() + 2)
        vfont.setBold(True)
        self.view_title.setFont(vfont)
        self.view_meta = QLabel()
        self.view_meta.setObjectName("meta")
        self.view_body = QTextBrowser()
        self.view_body.setOpenExternalLinks(True)
        self.edit_btn = QPushButton("Edit")

        viewer = QWidget()
        viewer_layout = QVBoxLayout(viewer)
        viewer_layout.addWidget(self.view_title)
        viewer_layout.addWidget(self.view_meta)
        viewer_layout.addWidget(self.view_body, 1)
        viewer_buttons = QHBoxLayout()
        viewer_buttons.addStretch(1)
        viewer_buttons.addWidget(self.edit_btn)
        viewer_layout.addLayout(viewer_buttons)

        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("Title")
        self.content_edit = QPlainTextEdit()
        self.content_edit.setPlaceholderText("Write your note here...")
        self.save_btn = QPushButton("Save")
        self.save_btn.setObjectName("primary")
        self.cancel_btn = QPushButton("Cancel")

        editor = QWidget()
        editor_layout = QVBoxLayout(editor)
        editor_layout.addWidget(self.title_edit)
        editor_layout.addWidget(self.content_edit, 1)
        editor_buttons = QHBoxLayout()
        editor_buttons.addStretch(1)
        editor_buttons.addWidget(self.save_btn)
        editor_buttons.addWidget(self.cancel_btn)
        editor_layout.addLayout(editor_buttons)

        self.right = QStackedWidget()
        self.right.addWidget(viewer)
        self.right.addWidget(editor)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(left)
        self.splitter.addWidget(self.right)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 3)

        self.status = QLabel()
        self.error_label = QLabel()
        self.error_label.setObjectName("error")
        footer = QHBoxLayout()
        footer.addWidget(self.status)
        footer.addStretch(1)
        footer.addWidget(self.error_label)

        root = QWidget()
        root_layout = QVBoxLayout(root)
        root_layout.addLayout(header)
        root_layout.addWidget(self.splitter, 1)
        root_layout.addLayout(footer)
        self.setCentralWidget(root)

        # signals -> intents
        self.new_btn.clicked.connect(self._controller.start_new)
        self.theme_btn.clicked.connect(self._controller.toggle_theme)
        self.edit_btn.clicked.connect(self._controller.start_edit)
        self.cancel_btn.clicked.connect(self._controller.cancel)
        self.save_btn.clicked.connect(self._on_save)
        self.listw.currentItemChanged.connect(self._on_current_item_changed)
        self.title_edit.textChanged.connect(
            lambda text: self._controller.change_field("title", text)
        )
        self.content_edit.textChanged.connect(
            lambda: self._controller.change_field("content", self.content_edit.toPlainText())
        )

        self._restore_ui_state()
        self._controller.subscribe(self.render)
        self.render(self._controller.state)

    # ───────────────────────── intents ─────────────────────────

    def _on_save(self) -> None:
        try:
            self._controller.save()
        except ValidationError as e:
            warn_invalid_note(self, str(e))

    def _on_delete(self, note: Note) -> None:
        if self._controller.busy:
            return
        if not confirm_delete(self, title=note.title):
            return
        self._controller.delete(note.id)

    def _on_current_item_changed(self, current: QListWidgetItem | None, _previous) -> None:
        if current is None:
            return
        note_id = current.data(Qt.UserRole)
        if note_id != self._controller.selected_id:
            self._controller.select(note_id)

    # ───────────────────────── rendering ─────────────────────────

    def render(self, state: ControllerState) -> None:
        if state.theme != self._theme_applied:
            self._apply_theme(state.theme)
        if state.notes is not self._notes_shown:
            self._render_list(state.notes)
        self._render_selection(state)
        self._render_right(state)
        self._render_busy(state)

        self.error_label.setText(state.error or "")
        if state.loading:
            self.status.setText("Loading notes…")
        elif state.saving:
            self.status.setText("Saving…")
        elif state.deleting:
            self.status.setText("Deleting…")
        else:
            self.status.setText(f"{len(state.notes)} note(s)")

    def _render_list(self, notes: tuple[Note, ...]) -> None:
        self._notes_shown = notes
        self._rows = []
        with blocked_signals(self.listw):
            self.listw.clear()
            for note in notes:
                item = QListWidgetItem()
                item.setData(Qt.UserRole, note.id)
                row = NoteRow(note, on_delete=self._on_delete)
                self._rows.append(row)
                item.setSizeHint(row.sizeHint())
                self.listw.addItem(item)
                self.listw.setItemWidget(item, row)
        self.listw.setVisible(bool(notes))
        self.empty_label.setVisible(not notes)

    def _render_selection(self, state: ControllerState) -> None:
        with blocked_signals(self.listw):
            if state.selected_id is None:
                self.listw.setCurrentRow(-1)
                return
            for i in range(self.listw.count()):
                if self.listw.item(i).data(Qt.UserRole) == state.selected_id:
                    self.listw.setCurrentRow(i)
                    return

    def _render_right(self, state: ControllerState) -> None:
        if state.is_editing and state.edit_buffer is not None:
            buf = state.edit_buffer
            # only push values that differ, so typing keeps the cursor
            if self.title_edit.text() != buf.title:
                with blocked_signals(self.title_edit):
                    self.title_edit.setText(buf.title)
            if self.content_edit.toPlainText() != buf.content:
                with blocked_signals(self.content_edit):
                    self.content_edit.setPlainText(buf.content)
            self.right.setCurrentIndex(_EDITOR)
            return

        self.right.setCurrentIndex(_VIEWER)
        note = state.selected_note
        if note is None:
            self.view_title.setText("")
            self.view_meta.setText("")
            self.view_body.setHtml(
                self._renderer.render_page("*Select or create a note to view.*", theme=state.theme)
            )
            self.edit_btn.setVisible(False)
            return
        self.view_title.setText(note.title)
        self.view_meta.setText(f"Updated: {format_updated(note)}")
        self.view_body.setHtml(self._renderer.render_page(note.content, theme=state.theme))
        self.edit_btn.setVisible(True)

    def _render_busy(self, state: ControllerState) -> None:
        busy = state.busy
        for w in (self.new_btn, self.edit_btn, self.save_btn, self.cancel_btn, self.listw):
            w.setEnabled(not busy)
        for row in self._rows:
            row.delete_btn.setEnabled(not busy)
        self.title_edit.setReadOnly(busy)
        self.content_edit.setReadOnly(busy)

    def _apply_theme(self, theme: str) -> None:
        self._theme_applied = theme
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(stylesheet_for(theme))
        self.theme_btn.setText(toggle_label(theme))
        self.theme_btn.setToolTip(f"Switch to {'light' if theme == 'dark' else 'dark'} mode")
        safe_set_setting(self._settings, SettingsKeys.UI_THEME, theme)

    # ───────────────────────── window state ─────────────────────────

    def _restore_ui_state(self) -> None:
        try:
            geo = self._settings.value(SettingsKeys.UI_GEOMETRY)
            if geo:
                self.restoreGeometry(geo)
            else:
                self.resize(1000, 650)
            sizes = get_sizes(self._settings, SettingsKeys.UI_SPLITTER)
            if sizes:
                self.splitter.setSizes(sizes)
        except Exception:
            log.exception("Failed to restore UI state from QSettings")

    def closeEvent(self, event):  # type: ignore[override]
        safe_set_setting(self._settings, SettingsKeys.UI_GEOMETRY, self.saveGeometry())
        safe_set_setting(self._settings, SettingsKeys.UI_SPLITTER, self.splitter.sizes())
        super().closeEvent(event)
