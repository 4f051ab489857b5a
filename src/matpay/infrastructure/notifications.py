"""JSON-file inbox implementation of the Notifier port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from matpay.application.ports import Notifier
from matpay.infrastructure.persistence.json_store import JsonFile

logger = logging.getLogger(__name__)


class JsonInboxNotifier(Notifier):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def notify(self, user_id: str, title: str, content: str, kind: str = "GENERAL") -> None:
        with self._file.lock:
            records = self._file.load()
            records.append(
                {
                    "id": len(records) + 1,
                    "user_id": user_id,
                    "title": title,
                    "content": content,
                    "type": kind,
                    "is_read": False,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                }
            )
            self._file.persist(records)
        logger.debug("Notified %s: %s", user_id, title)

    def inbox(self, user_id: str) -> list[dict]:
        return [r for r in self._file.load() if r["user_id"] == user_id]
