from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

APP_NAME = "personal-notes"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"

THEMES = ("light", "dark")


@dataclass(frozen=True)
class SettingsKeys:
    UI_THEME: str = "ui/theme"
    UI_GEOMETRY: str = "ui/geometry"
    UI_SPLITTER: str = "ui/splitter_sizes"


def normalize_theme(name: str | None) -> str:
    name = (name or "").strip().lower()
    return name if name in THEMES else "light"
