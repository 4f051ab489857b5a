"""Domain service: unique reference generation.

References combine a date, a process-wide monotonic counter and a random
suffix, and are checked against the store before being handed out, so
uniqueness never rests on the clock alone.
"""

from __future__ import annotations

import itertools
import secrets
import threading
from datetime import datetime, timezone
from typing import Callable

from matpay.domain.exceptions import ConflictError

MAX_ATTEMPTS = 5


class ReferenceGenerator:

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(self, prefix: str, exists: Callable[[str], bool] | None = None) -> str:
        """Return ``PREFIX-YYYYMMDD-NNNNNN-XXXXXX`` not yet known to ``exists``."""
        for _ in range(MAX_ATTEMPTS):
            with self._lock:
                seq = next(self._counter)
            candidate = (
                f"{prefix}-{self._clock():%Y%m%d}-{seq:06d}-{secrets.token_hex(3).upper()}"
            )
            if exists is None or not exists(candidate):
                return candidate
        raise ConflictError(f"Could not generate a unique {prefix} reference")

    def order_number(self, exists: Callable[[str], bool]) -> str:
        return self.generate("ORD", exists)

    def payment_reference(self, exists: Callable[[str], bool]) -> str:
        return self.generate("PAY", exists)

    def transfer_reference(self, retry: bool = False) -> str:
        return self.generate("RTY" if retry else "TXF")

    def receipt_number(self) -> str:
        return self.generate("RCP")
