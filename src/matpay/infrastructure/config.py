"""Runtime settings, read from the environment.

``.env.local`` and ``.env`` in the working directory are loaded first
(without overriding variables already set), so local development needs
no exported variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from dotenv import load_dotenv


def load_env(
    filenames: Iterable[str] = (".env.local", ".env"),
    search_dir: Path | None = None,
) -> list[Path]:
    """Load env files; returns the files actually loaded."""
    search_dir = search_dir or Path.cwd()
    loaded: list[Path] = []
    for name in filenames:
        p = search_dir / name
        if p.is_file():
            load_dotenv(dotenv_path=p, override=False)
            loaded.append(p)
    return loaded


@dataclass(frozen=True)
class Settings:
    paystack_secret_key: str
    paystack_base_url: str = "https://api.paystack.co"
    currency: str = "GHS"
    data_dir: Path = Path("data")
    callback_url: str | None = None
    http_timeout: float = 30.0
    log_level: str = "INFO"

    @staticmethod
    def from_env(load_files: bool = True) -> Settings:
        if load_files:
            load_env()
        return Settings(
            paystack_secret_key=os.getenv("PAYSTACK_SECRET_KEY", ""),
            paystack_base_url=os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co").rstrip("/"),
            currency=os.getenv("MATPAY_CURRENCY", "GHS"),
            data_dir=Path(os.getenv("MATPAY_DATA_DIR", "data")),
            callback_url=os.getenv("MATPAY_CALLBACK_URL") or None,
            http_timeout=float(os.getenv("MATPAY_HTTP_TIMEOUT", "30")),
            log_level=os.getenv("MATPAY_LOG_LEVEL", "INFO").upper(),
        )
