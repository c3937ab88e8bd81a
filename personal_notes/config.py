"""Store credentials and connection options, read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from personal_notes.core.errors import ConfigurationError

URL_VARS = ("SUPABASE_URL", "REACT_APP_SUPABASE_URL")
KEY_VARS = ("SUPABASE_KEY", "REACT_APP_SUPABASE_KEY")
TABLE_VAR = "NOTES_TABLE"
TIMEOUT_VAR = "NOTES_TIMEOUT"

DEFAULT_TABLE = "notes"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class StoreConfig:
    url: str
    key: str
    table: str = DEFAULT_TABLE
    timeout: float = DEFAULT_TIMEOUT


def _first(environ: Mapping[str, str], names: tuple[str, ...]) -> str:
    for name in names:
        value = (environ.get(name) or "").strip()
        if value:
            return value
    return ""


def _get_float(environ: Mapping[str, str], name: str, default: float) -> float:
    try:
        value = float(environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def load_store_config(environ: Mapping[str, str] | None = None) -> StoreConfig:
    """
    Build StoreConfig from environment variables.

    Raises ConfigurationError listing the missing variables when the
    endpoint URL or the access key is absent.
    """
    env = os.environ if environ is None else environ
    url = _first(env, URL_VARS)
    key = _first(env, KEY_VARS)

    missing = tuple(names[0] for names, value in ((URL_VARS, url), (KEY_VARS, key)) if not value)
    if missing:
        raise ConfigurationError(
            "Missing note store configuration: " + ", ".join(missing),
            missing=missing,
        )

    return StoreConfig(
        url=url,
        key=key,
        table=(env.get(TABLE_VAR) or "").strip() or DEFAULT_TABLE,
        timeout=_get_float(env, TIMEOUT_VAR, DEFAULT_TIMEOUT),
    )
