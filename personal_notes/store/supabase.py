from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from personal_notes.config import StoreConfig
from personal_notes.core.errors import StoreError
from personal_notes.core.models import Note
from personal_notes.settings import APP_NAME
from personal_notes.store.base import check_unique_ids, fields_to_record, note_from_record

log = logging.getLogger(f"{APP_NAME}.store")


class SupabaseNoteStore:
    """
    NoteStore over a Supabase (PostgREST) table.

    Expected columns: id, title, content, created, updated.
    """

    def __init__(self, config: StoreConfig, *, transport: httpx.BaseTransport | None = None):
        self._table = config.table
        self._client = httpx.Client(
            base_url=f"{config.url.rstrip('/')}/rest/v1",
            headers={
                "apikey": config.key,
                "Authorization": f"Bearer {config.key}",
                "Prefer": "return=representation",
            },
            timeout=config.timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def list(self) -> list[Note]:
        rows = self._request("GET", params={"select": "*", "order": "updated.desc"})
        return check_unique_ids([note_from_record(r) for r in rows])

    def create(self, fields: Mapping[str, Any]) -> Note:
        rows = self._request("POST", json=fields_to_record(fields))
        if not rows:
            raise StoreError("Create returned no record")
        return note_from_record(rows[0])

    def update(self, note_id: str, fields: Mapping[str, Any]) -> Note:
        rows = self._request("PATCH", params={"id": f"eq.{note_id}"}, json=fields_to_record(fields))
        if not rows:
            raise StoreError(f"Note not found: {note_id}")
        return note_from_record(rows[0])

    def delete(self, note_id: str) -> None:
        rows = self._request("DELETE", params={"id": f"eq.{note_id}"})
        if not rows:
            raise StoreError(f"Note not found: {note_id}")

    def _request(self, method: str, *, params: dict | None = None, json: Any = None) -> list[dict]:
        path = f"/{self._table}"
        try:
            resp = self._client.request(method, path, params=params, json=json)
            resp.raise_for_status()
            data = resp.json() if resp.content else []
        except httpx.HTTPStatusError as e:
            log.warning("%s %s -> HTTP %s: %s", method, path, e.response.status_code, e.response.text[:200])
            raise StoreError(f"{method} {path} failed with HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise StoreError(f"{method} {path} failed: {e}") from e
        except ValueError as e:
            raise StoreError(f"{method} {path} returned invalid JSON") from e

        if not isinstance(data, list):
            raise StoreError(f"{method} {path} returned an unexpected payload")
        log.debug("%s %s -> %d row(s)", method, path, len(data))
        return data
