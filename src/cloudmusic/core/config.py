# core/config.py
from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass

from PySide6.QtCore import QStandardPaths

from cloudmusic.core.logger import get_logger
from cloudmusic.db.database import DEFAULT_API_BASE, DEFAULT_LRCLIB_INSTANCE, get_config

_logger = get_logger("config")

DEFAULT_POLL_INTERVAL_MS = 25


@dataclass(frozen=True)
class AppConfig:
    api_base_url: str = DEFAULT_API_BASE
    lrclib_instance: str = DEFAULT_LRCLIB_INSTANCE
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS


def get_app_data_dir() -> str:
    base = os.getenv("CLOUDMUSIC_DATA_DIR") or QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.AppDataLocation
    )
    os.makedirs(base, exist_ok=True)
    return base


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        _logger.warning("%s=%r is not an integer; using %d", name, raw, default)
        return default


def load_config(db: sqlite3.Connection | None = None) -> AppConfig:
    """Defaults, then the stored config row, then CLOUDMUSIC_* env overrides."""
    api_base_url = DEFAULT_API_BASE
    lrclib_instance = DEFAULT_LRCLIB_INSTANCE

    if db is not None:
        stored = get_config(db)
        api_base_url = stored.api_base_url or api_base_url
        lrclib_instance = stored.lrclib_instance or lrclib_instance

    api_base_url = os.getenv("CLOUDMUSIC_API_BASE") or api_base_url
    lrclib_instance = os.getenv("CLOUDMUSIC_LRCLIB") or lrclib_instance

    return AppConfig(
        api_base_url=api_base_url.rstrip("/"),
        lrclib_instance=lrclib_instance.rstrip("/"),
        poll_interval_ms=_env_int("CLOUDMUSIC_POLL_MS", DEFAULT_POLL_INTERVAL_MS),
    )
