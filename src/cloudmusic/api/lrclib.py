from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from cloudmusic.core.errors import ApiError


@dataclass(frozen=True)
class LyricsResult:
    plain: Optional[str]
    synced: Optional[str]
    instrumental: bool
    source: str  # "get" | "search" | "none"

    def text(self) -> str:
        if self.instrumental:
            return "[instrumental]"
        return self.synced or self.plain or ""


def _result_from(data: dict, source: str) -> LyricsResult:
    plain = (data.get("plainLyrics") or "").strip() or None
    synced = (data.get("syncedLyrics") or "").strip() or None
    instrumental = bool(data.get("instrumental", False)) or (synced == "[au: instrumental]")
    return LyricsResult(plain=plain, synced=synced, instrumental=instrumental, source=source)


class LrcLibClient:
    def __init__(self, base_url: str = "https://lrclib.net", user_agent: str = "cloudmusic-qt/0.1"):
        self.base_url = base_url.rstrip("/")
        if self.base_url.endswith("/api"):
            self.base_url = self.base_url[: -len("/api")]
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def _request(self, path: str, params: dict):
        try:
            r = self.session.get(f"{self.base_url}{path}", params=params, timeout=15)
        except requests.RequestException as e:
            raise ApiError(f"lrclib {path}: {e}") from e
        if r.status_code == 404:
            return None
        if not r.ok:
            raise ApiError(f"lrclib {path} failed", code=r.status_code)
        try:
            return r.json()
        except ValueError:
            raise ApiError(f"lrclib {path}: response is not JSON") from None

    def get_by_metadata(self, title: str, artist: str, album: str | None, duration_s: float | None) -> Optional[dict]:
        params = {"track_name": title, "artist_name": artist}
        if album:
            params["album_name"] = album
        if duration_s and duration_s > 0:
            params["duration"] = int(round(duration_s))
        return self._request("/api/get", params)

    def search(self, query: str, artist: str | None = None, limit: int = 10) -> list[dict]:
        params = {"q": query}
        if artist:
            params["artist_name"] = artist
        data = self._request("/api/search", params)
        return data[:limit] if isinstance(data, list) else []

    def fetch_best(self, title: str, artist: str, album: str | None, duration_s: float | None) -> LyricsResult:
        # 1) exact metadata match, 2) fuzzy search on "artist title"
        data = self.get_by_metadata(title=title, artist=artist, album=album, duration_s=duration_s)
        if data:
            return _result_from(data, "get")

        items = self.search(query=f"{artist} {title}", artist=artist)
        if items:
            return _result_from(items[0], "search")

        return LyricsResult(plain=None, synced=None, instrumental=False, source="none")
