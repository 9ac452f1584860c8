from __future__ import annotations

from dataclasses import dataclass
import sqlite3


@dataclass
class ConfigData:
    api_base_url: str
    lrclib_instance: str

    @staticmethod
    def from_row(row: sqlite3.Row) -> "ConfigData":
        return ConfigData(
            api_base_url=row["api_base_url"],
            lrclib_instance=row["lrclib_instance"],
        )
