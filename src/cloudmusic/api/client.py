# api/client.py
from __future__ import annotations

from typing import Any, Optional

import requests

from cloudmusic.core.errors import ApiError
from cloudmusic.core.logger import get_logger
from cloudmusic.core.models import LoginInfo, SongInfo, SongList

_logger = get_logger("api")

# Index -> official chart playlist id (found page tabs).
TOP_CHARTS: list[tuple[int, str]] = [
    (19723756, "Soaring"),
    (3779629, "New Songs"),
    (2884035, "Original"),
    (3778678, "Hot Songs"),
]


class MusicApi:
    """
    Thin blocking client for a NeteaseCloudMusicApi-compatible HTTP service.

    Every call blocks on the network: only use it from background tasks.
    """

    def __init__(self, base_url: str, user_agent: str = "cloudmusic-qt/0.1", timeout: float = 15):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    # ---- transport -----------------------------------------------

    def _get(self, path: str, **params: Any) -> dict[str, Any]:
        _logger.debug("GET %s", path)
        try:
            r = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"{path}: {e}") from e

        try:
            data = r.json()
        except ValueError:
            raise ApiError(f"{path}: response is not JSON (HTTP {r.status_code})", code=r.status_code) from None

        code = data.get("code", r.status_code) if isinstance(data, dict) else r.status_code
        if not r.ok or code != 200:
            msg = (data.get("msg") or data.get("message")) if isinstance(data, dict) else None
            raise ApiError(msg or f"{path} failed", code=code)
        return data

    def export_cookies(self) -> dict[str, str]:
        return requests.utils.dict_from_cookiejar(self.session.cookies)

    def import_cookies(self, cookies: dict[str, str]) -> None:
        if cookies:
            self.session.cookies.update(cookies)

    def clear_cookies(self) -> None:
        self.session.cookies.clear()

    # ---- session -------------------------------------------------

    def login(self, username: str, password: str) -> LoginInfo:
        if "@" in username:
            data = self._get("/login", email=username, password=password)
        else:
            data = self._get("/login/cellphone", phone=username, password=password)
        profile = data.get("profile") or {}
        if not profile:
            raise ApiError("login response has no profile")
        return LoginInfo.from_json(profile)

    def logout(self) -> None:
        self._get("/logout")

    def login_status(self) -> Optional[LoginInfo]:
        data = self._get("/login/status")
        profile = (data.get("data") or {}).get("profile")
        return LoginInfo.from_json(profile) if profile else None

    def daily_task(self) -> int:
        """Returns the points earned by today's check-in."""
        data = self._get("/daily_signin", type=1)
        return int(data.get("point") or 0)

    # ---- song lists ----------------------------------------------

    def top_song_lists(self, limit: int = 12) -> list[SongList]:
        data = self._get("/top/playlist", order="hot", limit=limit)
        return [SongList.from_json(p) for p in data.get("playlists") or []]

    def recommend_resource(self, limit: int = 12) -> list[SongList]:
        data = self._get("/personalized", limit=limit)
        return [SongList.from_json(p) for p in data.get("result") or []]

    def song_list_detail(self, song_list_id: int, limit: int = 500) -> list[SongInfo]:
        data = self._get("/playlist/track/all", id=song_list_id, limit=limit)
        return [SongInfo.from_json(s) for s in data.get("songs") or []]

    def chart_detail(self, chart_id: int) -> list[SongInfo]:
        if not 0 <= chart_id < len(TOP_CHARTS):
            raise ApiError(f"unknown chart {chart_id}")
        return self.song_list_detail(TOP_CHARTS[chart_id][0], limit=100)

    def user_song_lists(self, uid: int) -> list[SongList]:
        data = self._get("/user/playlist", uid=uid)
        return [SongList.from_json(p) for p in data.get("playlist") or []]

    def unsubscribe_song_list(self, song_list_id: int) -> None:
        self._get("/playlist/subscribe", t=2, id=song_list_id)

    # ---- songs ---------------------------------------------------

    def recommend_songs(self) -> list[SongInfo]:
        data = self._get("/recommend/songs")
        return [SongInfo.from_json(s) for s in (data.get("data") or {}).get("dailySongs") or []]

    def personal_fm(self) -> list[SongInfo]:
        data = self._get("/personal_fm")
        return [SongInfo.from_json(s) for s in data.get("data") or []]

    def like(self, song_id: int, like: bool = True) -> None:
        self._get("/like", id=song_id, like=str(like).lower())

    def fm_trash(self, song_id: int) -> None:
        self._get("/fm_trash", id=song_id)

    def search(self, keywords: str, limit: int = 50) -> list[SongInfo]:
        data = self._get("/cloudsearch", keywords=keywords, type=1, limit=limit)
        return [SongInfo.from_json(s) for s in (data.get("result") or {}).get("songs") or []]

    def song_url(self, song_id: int) -> str:
        data = self._get("/song/url", id=song_id)
        items = data.get("data") or []
        url = items[0].get("url") if items else None
        if not url:
            raise ApiError(f"no stream available for song {song_id}")
        return url
