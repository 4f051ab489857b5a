"""Shared file handling for the JSON-backed repositories.

Every repository keeps one JSON array in one file.  Reads and
read-modify-write cycles go through ``lock`` so concurrent requests in
one process never interleave writes; the file itself is replaced
atomically so a crash mid-write never leaves half a document behind.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime
from pathlib import Path


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self.lock = threading.RLock()
        self._ensure_file()

    def load(self) -> list[dict]:
        with self.lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        with self.lock:
            tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
            tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, self._file_path)

    def upsert(self, record: dict, key: str) -> None:
        """Replace the record with the same ``key`` value, or append it."""
        with self.lock:
            records = self.load()
            for i, raw in enumerate(records):
                if raw[key] == record[key]:
                    records[i] = record
                    break
            else:
                records.append(record)
            self.persist(records)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def dump_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
