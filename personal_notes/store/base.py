from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

from personal_notes.core.errors import StoreError
from personal_notes.core.models import Note


class NoteStore(Protocol):
    """
    Persistence capability the controller talks to.

    Every method raises StoreError on failure, including unknown ids
    for update() and delete().
    """

    def list(self) -> list[Note]: ...

    def create(self, fields: Mapping[str, Any]) -> Note: ...

    def update(self, note_id: str, fields: Mapping[str, Any]) -> Note: ...

    def delete(self, note_id: str) -> None: ...


# seconds fraction of any length, e.g. "12:34:56.12345"
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def normalize_iso(value: str) -> str:
    """
    Make PostgreSQL-style ISO strings parseable by fromisoformat on 3.10:
    a trailing "Z" becomes "+00:00" and the fraction is padded or cut to 6 digits.
    """
    s = value.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    return _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", s, count=1)


def parse_timestamp(value) -> datetime:
    """Accept ISO-8601 strings, epoch milliseconds or datetimes."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    elif isinstance(value, str) and value.strip():
        try:
            ts = datetime.fromisoformat(normalize_iso(value))
        except ValueError as e:
            raise StoreError(f"Bad timestamp: {value!r}") from e
    else:
        raise StoreError(f"Bad timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def format_timestamp(ts: datetime) -> str:
    return ts.isoformat()


def note_from_record(record: Mapping[str, Any]) -> Note:
    try:
        note_id = record["id"]
        created = record["created"]
        updated = record["updated"]
    except (KeyError, TypeError) as e:
        raise StoreError(f"Malformed note record: {record!r}") from e
    if note_id is None or str(note_id) == "":
        raise StoreError(f"Note record without id: {record!r}")
    return Note(
        id=str(note_id),
        title=str(record.get("title") or ""),
        content=str(record.get("content") or ""),
        created=parse_timestamp(created),
        updated=parse_timestamp(updated),
    )


def fields_to_record(fields: Mapping[str, Any]) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for key in ("title", "content", "created", "updated"):
        if key not in fields:
            continue
        value = fields[key]
        record[key] = format_timestamp(value) if isinstance(value, datetime) else value
    return record


def sort_newest_first(notes: list[Note]) -> list[Note]:
    return sorted(notes, key=lambda n: n.updated, reverse=True)


def check_unique_ids(notes: list[Note]) -> list[Note]:
    """A collection with two records under one id is unusable; report it as a store fault."""
    seen: set[str] = set()
    for n in notes:
        if n.id in seen:
            raise StoreError(f"Duplicate note id in store: {n.id}")
        seen.add(n.id)
    return notes
