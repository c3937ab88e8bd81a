from __future__ import annotations

import argparse
from pathlib import Path

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from personal_notes.config import load_store_config
from personal_notes.core.controller import NoteController
from personal_notes.core.errors import ConfigurationError
from personal_notes.logging_setup import SESSION_ID, get_logger, install_global_exception_hooks
from personal_notes.settings import APP_NAME, SettingsKeys
from personal_notes.store.json_file import JsonFileNoteStore
from personal_notes.store.supabase import SupabaseNoteStore
from personal_notes.store.worker import ThreadPoolRunner
from personal_notes.ui.config_error import ConfigErrorWindow
from personal_notes.ui.main_window import NotesWindow
from personal_notes.ui.qt_utils import get_str
from personal_notes.ui.theme import stylesheet_for


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog=APP_NAME, description="Personal notes client")
    p.add_argument(
        "--local",
        type=Path,
        metavar="PATH",
        help="Keep notes in a local JSON file instead of the remote store",
    )
    return p.parse_args(argv)


def build_store(args: argparse.Namespace):
    if args.local is not None:
        return JsonFileNoteStore(args.local.expanduser())
    return SupabaseNoteStore(load_store_config())


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    log = get_logger()
    install_global_exception_hooks(log)

    app = QApplication([])
    settings = QSettings(APP_NAME, APP_NAME)
    theme = get_str(settings, SettingsKeys.UI_THEME, "light")

    try:
        store = build_store(args)
    except ConfigurationError as e:
        log.error("Configuration error: %s", e)
        app.setStyleSheet(stylesheet_for(theme))
        win = ConfigErrorWindow(e)
        win.resize(700, 400)
        win.show()
        return app.exec()

    close = getattr(store, "close", None)
    if close is not None:
        app.aboutToQuit.connect(close)

    runner = ThreadPoolRunner(parent=app)
    controller = NoteController(store, runner=runner, theme=theme, logger=log)
    win = NotesWindow(controller=controller, settings=settings)
    win.show()
    log.info("Application started: store=%s sid=%s", type(store).__name__, SESSION_ID)
    controller.load()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
