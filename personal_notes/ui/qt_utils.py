from __future__ import annotations

from contextlib import contextmanager

from PySide6.QtCore import QSettings


@contextmanager
def blocked_signals(obj):
    """Temporarily silence a widget's signals while it is updated from state."""
    if obj is None:
        yield
        return
    try:
        obj.blockSignals(True)
        yield
    finally:
        try:
            obj.blockSignals(False)
        except RuntimeError:
            # underlying C++ object already destroyed
            pass


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_sizes(settings: QSettings, key: str) -> list[int] | None:
    value = settings.value(key)
    if isinstance(value, str):
        value = value.replace(",", " ").split()
    if not isinstance(value, (list, tuple)):
        return None
    out: list[int] = []
    for x in value:
        try:
            out.append(int(x))
        except (TypeError, ValueError):
            pass
    return out or None


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort write; a failing settings backend must not break the UI."""
    try:
        settings.setValue(key, value)
    except Exception:
        pass
