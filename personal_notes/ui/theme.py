from __future__ import annotations

LIGHT = """
QWidget { background: #ffffff; color: #1f2328; }
QListWidget, QLineEdit, QPlainTextEdit, QTextBrowser { background: #f6f8fa; border: 1px solid #d0d7de; }
QListWidget::item:selected { background: #ddf4ff; color: #1f2328; }
QPushButton { background: #f6f8fa; border: 1px solid #d0d7de; padding: 4px 10px; border-radius: 4px; }
QPushButton:disabled { color: #8c959f; }
QPushButton#primary { background: #1f883d; color: #ffffff; border-color: #1a7f37; }
QPushButton#danger, QToolButton#danger { color: #cf222e; }
QLabel#error { color: #cf222e; }
QLabel#meta { color: #656d76; }
"""

DARK = """
QWidget { background: #0d1117; color: #e6edf3; }
QListWidget, QLineEdit, QPlainTextEdit, QTextBrowser { background: #161b22; border: 1px solid #30363d; }
QListWidget::item:selected { background: #1f6feb; color: #ffffff; }
QPushButton { background: #21262d; border: 1px solid #30363d; padding: 4px 10px; border-radius: 4px; }
QPushButton:disabled { color: #6e7681; }
QPushButton#primary { background: #238636; color: #ffffff; border-color: #2ea043; }
QPushButton#danger, QToolButton#danger { color: #f85149; }
QLabel#error { color: #f85149; }
QLabel#meta { color: #8b949e; }
"""


def stylesheet_for(theme: str) -> str:
    return DARK if theme == "dark" else LIGHT


def toggle_label(theme: str) -> str:
    return "☀ Light" if theme == "dark" else "🌙 Dark"
