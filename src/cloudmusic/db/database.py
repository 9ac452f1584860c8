import json
import os
import sqlite3
import threading

from cloudmusic.core.logger import get_logger
from cloudmusic.core.models import LoginInfo
from cloudmusic.db.models import ConfigData

CURRENT_DB_VERSION = 2
DEFAULT_API_BASE = "http://localhost:3000"
DEFAULT_LRCLIB_INSTANCE = "https://lrclib.net"

_logger = get_logger("db")

# One connection is shared by the UI thread and the background pool; every
# read and every write transaction holds this lock.
_lock = threading.Lock()


def initialize_database(app_data_dir: str) -> sqlite3.Connection:
    os.makedirs(app_data_dir, exist_ok=True)
    sqlite_path = os.path.join(app_data_dir, "db.sqlite3")
    _logger.info("Database file path: %s", sqlite_path)

    db = sqlite3.connect(sqlite_path, check_same_thread=False)
    db.row_factory = sqlite3.Row

    existing_version = db.execute("PRAGMA user_version").fetchone()[0]
    upgrade_database_if_needed(db, existing_version)

    return db


def upgrade_database_if_needed(db: sqlite3.Connection, existing_version: int):
    _logger.debug("Existing database version: %s", existing_version)

    if existing_version >= CURRENT_DB_VERSION:
        return

    if existing_version <= 0:
        _logger.info("Migrate database version 1...")
        db.execute("PRAGMA journal_mode=WAL")
        db.execute("PRAGMA user_version=1")
        db.executescript(f"""
            CREATE TABLE config_data (
                id INTEGER PRIMARY KEY,
                api_base_url TEXT DEFAULT '{DEFAULT_API_BASE}',
                lrclib_instance TEXT DEFAULT '{DEFAULT_LRCLIB_INSTANCE}'
            );
            CREATE TABLE login_data (
                id INTEGER PRIMARY KEY,
                uid INTEGER,
                nickname TEXT,
                avatar_url TEXT,
                vip_type INTEGER
            );
            INSERT INTO config_data (api_base_url, lrclib_instance)
                VALUES ('{DEFAULT_API_BASE}', '{DEFAULT_LRCLIB_INSTANCE}');
        """)
        db.commit()

    if existing_version <= 1:
        _logger.info("Migrate database version 2...")
        db.execute("PRAGMA user_version=2")
        db.execute("ALTER TABLE login_data ADD COLUMN cookies TEXT")
        db.commit()


# ---- config ----------------------------------------------------

def get_config(db: sqlite3.Connection) -> ConfigData:
    with _lock:
        row = db.execute("SELECT * FROM config_data LIMIT 1").fetchone()
    return ConfigData.from_row(row)


def update_config(db: sqlite3.Connection, api_base_url: str | None = None, lrclib_instance: str | None = None):
    with _lock:
        if api_base_url is not None:
            db.execute("UPDATE config_data SET api_base_url = ?", (api_base_url,))
        if lrclib_instance is not None:
            db.execute("UPDATE config_data SET lrclib_instance = ?", (lrclib_instance,))
        db.commit()


# ---- login -----------------------------------------------------

def get_login_info(db: sqlite3.Connection) -> LoginInfo | None:
    with _lock:
        row = db.execute("SELECT * FROM login_data LIMIT 1").fetchone()
    if row is None:
        return None
    return LoginInfo(
        uid=int(row["uid"] or 0),
        nickname=row["nickname"] or "",
        avatar_url=row["avatar_url"] or "",
        vip_type=int(row["vip_type"] or 0),
    )


def get_cookies(db: sqlite3.Connection) -> dict[str, str]:
    with _lock:
        row = db.execute("SELECT cookies FROM login_data LIMIT 1").fetchone()
    if row is None or not row["cookies"]:
        return {}
    try:
        data = json.loads(row["cookies"])
    except json.JSONDecodeError:
        _logger.warning("stored cookies are not valid JSON; ignoring them")
        return {}
    return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}


def save_login_info(db: sqlite3.Connection, info: LoginInfo, cookies: dict[str, str] | None = None):
    # One user at a time.
    with _lock:
        db.execute("DELETE FROM login_data")
        db.execute(
            "INSERT INTO login_data (uid, nickname, avatar_url, vip_type, cookies) VALUES (?, ?, ?, ?, ?)",
            (info.uid, info.nickname, info.avatar_url, info.vip_type, json.dumps(cookies or {})),
        )
        db.commit()


def clear_login_info(db: sqlite3.Connection):
    with _lock:
        db.execute("DELETE FROM login_data")
        db.commit()
