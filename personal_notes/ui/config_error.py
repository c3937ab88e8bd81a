from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

from personal_notes.core.errors import ConfigurationError
from personal_notes.settings import LOG_PATH


class ConfigErrorWindow(QMainWindow):
    """Shown instead of the notes UI when the store cannot be configured."""

    def __init__(self, error: ConfigurationError):
        super().__init__()
        self.setWindowTitle("Personal Notes - configuration error")

        heading = QLabel("The notes store is not configured.")
        heading.setObjectName("error")
        heading.setAlignment(Qt.AlignCenter)
        font = heading.font()
        font.setPointSize(font.pointSize() + 4)
        font.setBold(True)
        heading.setFont(font)

        missing = ", ".join(error.missing) or str(error)
        details = QLabel(
            f"Missing: {missing}\n\n"
            "Set the store URL and access key in the environment and restart the app.\n"
            f"Details are in the log: {LOG_PATH}"
        )
        details.setAlignment(Qt.AlignCenter)
        details.setWordWrap(True)
        details.setTextInteractionFlags(Qt.TextSelectableByMouse)

        root = QWidget()
        layout = QVBoxLayout(root)
        layout.addStretch(1)
        layout.addWidget(heading)
        layout.addWidget(details)
        layout.addStretch(1)
        self.setCentralWidget(root)
