from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Mapping

from personal_notes.core.errors import StoreError
from personal_notes.core.models import Note
from personal_notes.settings import APP_NAME
from personal_notes.store.base import (
    check_unique_ids,
    fields_to_record,
    note_from_record,
    sort_newest_first,
)

log = logging.getLogger(f"{APP_NAME}.store")


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    Atomic-ish file write:
      - write to temp file in same directory
      - fsync
      - replace() into final path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.parent / f".{path.name}.tmp-{uuid.uuid4().hex}"
    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


class JsonFileNoteStore:
    """NoteStore kept in a single local JSON file: {"notes": [record, ...]}."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def list(self) -> list[Note]:
        return sort_newest_first(check_unique_ids([note_from_record(r) for r in self._read()]))

    def create(self, fields: Mapping[str, Any]) -> Note:
        records = self._read()
        record = fields_to_record(fields)
        record["id"] = uuid.uuid4().hex
        note = note_from_record(record)
        records.append(record)
        self._write(records)
        return note

    def update(self, note_id: str, fields: Mapping[str, Any]) -> Note:
        records = self._read()
        for i, r in enumerate(records):
            if str(r.get("id")) == note_id:
                merged = {**r, **fields_to_record(fields)}
                note = note_from_record(merged)
                records[i] = merged
                self._write(records)
                return note
        raise StoreError(f"Note not found: {note_id}")

    def delete(self, note_id: str) -> None:
        records = self._read()
        remaining = [r for r in records if str(r.get("id")) != note_id]
        if len(remaining) == len(records):
            raise StoreError(f"Note not found: {note_id}")
        self._write(remaining)

    def _read(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read notes file {self.path}: {e}") from e
        records = data.get("notes") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise StoreError(f"Notes file has unexpected layout: {self.path}")
        return records

    def _write(self, records: list[dict]) -> None:
        text = json.dumps({"notes": records}, ensure_ascii=False, indent=2)
        try:
            atomic_write_text(self.path, text)
        except OSError as e:
            raise StoreError(f"Cannot write notes file {self.path}: {e}") from e
        log.debug("Notes file written: path=%s count=%d", self.path, len(records))
