from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_delete(parent: QWidget, *, title: str) -> bool:
    """Blocking confirmation before a note is removed from the store."""
    msg = QMessageBox(parent)
    msg.setIcon(QMessageBox.Warning)
    msg.setWindowTitle("Delete note")
    msg.setText("Delete this note?")
    msg.setInformativeText(title)
    btn_delete = msg.addButton("Delete", QMessageBox.DestructiveRole)
    btn_cancel = msg.addButton("Cancel", QMessageBox.RejectRole)
    msg.setDefaultButton(btn_cancel)
    msg.exec()
    return msg.clickedButton() == btn_delete


def warn_invalid_note(parent: QWidget, message: str) -> None:
    QMessageBox.warning(parent, "Save note", message)
