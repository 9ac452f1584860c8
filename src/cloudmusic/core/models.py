# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class PlayerTypes(Enum):
    SONG = auto()
    FM = auto()


@dataclass(frozen=True)
class LoginInfo:
    uid: int
    nickname: str
    avatar_url: str = ""
    vip_type: int = 0

    @staticmethod
    def from_json(profile: dict[str, Any]) -> "LoginInfo":
        return LoginInfo(
            uid=int(profile.get("userId") or 0),
            nickname=profile.get("nickname") or "",
            avatar_url=profile.get("avatarUrl") or "",
            vip_type=int(profile.get("vipType") or 0),
        )


@dataclass(frozen=True)
class SongInfo:
    id: int
    name: str
    singer: str
    album: str
    pic_url: str
    duration_ms: int
    song_url: str = ""

    @staticmethod
    def from_json(song: dict[str, Any]) -> "SongInfo":
        # Playlist detail uses "ar"/"al"/"dt", search and FM use "artists"/"album"/"duration".
        artists = song.get("ar") or song.get("artists") or []
        album = song.get("al") or song.get("album") or {}
        return SongInfo(
            id=int(song["id"]),
            name=song.get("name") or "",
            singer=" / ".join(a.get("name") or "" for a in artists),
            album=album.get("name") or "",
            pic_url=album.get("picUrl") or "",
            duration_ms=int(song.get("dt") or song.get("duration") or 0),
        )

    def display_title(self) -> str:
        return f"{self.singer} — {self.name}" if self.singer else self.name


@dataclass(frozen=True)
class SongList:
    id: int
    name: str
    cover_img_url: str

    @staticmethod
    def from_json(item: dict[str, Any]) -> "SongList":
        return SongList(
            id=int(item["id"]),
            name=item.get("name") or "",
            cover_img_url=item.get("coverImgUrl") or item.get("picUrl") or "",
        )
