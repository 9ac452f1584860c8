# core/actions.py
"""
Every state transition the client supports, as plain immutable records.

Producers build one of these the moment a change is known and push it through
the action channel; the dispatcher consumes each exactly once.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union, get_args

from cloudmusic.core.models import LoginInfo, PlayerTypes, SongInfo, SongList


# ---- navigation / views ----------------------------------------

@dataclass(frozen=True)
class SwitchStackMain:
    pass


@dataclass(frozen=True)
class SwitchStackSub:
    id: int
    name: str
    image_path: str

    @staticmethod
    def of(triple: tuple[int, str, str]) -> "SwitchStackSub":
        return SwitchStackSub(*triple)


@dataclass(frozen=True)
class RefreshHome:
    pass


@dataclass(frozen=True)
class RefreshHomeView:
    top_song_lists: list[SongList] = field(default_factory=list)
    recommended: list[SongList] = field(default_factory=list)


@dataclass(frozen=True)
class RefreshSubUpView:
    name: str
    image_path: str


@dataclass(frozen=True)
class RefreshSubLowView:
    songs: list[SongInfo] = field(default_factory=list)


@dataclass(frozen=True)
class RefreshFoundViewInit:
    chart_id: int


@dataclass(frozen=True)
class RefreshFoundView:
    songs: list[SongInfo] = field(default_factory=list)


@dataclass(frozen=True)
class RefreshMine:
    pass


@dataclass(frozen=True)
class MineHideAll:
    pass


@dataclass(frozen=True)
class MineShowFm:
    pass


@dataclass(frozen=True)
class RefreshMineViewInit:
    row: int


@dataclass(frozen=True)
class RefreshMineView:
    songs: list[SongInfo]
    title: str


@dataclass(frozen=True)
class RefreshMineFm:
    song: SongInfo


@dataclass(frozen=True)
class RefreshMineSidebar:
    song_lists: list[SongList] = field(default_factory=list)


@dataclass(frozen=True)
class RefreshMineFmPlayerList:
    pass


@dataclass(frozen=True)
class PlayerFm:
    pass


@dataclass(frozen=True)
class FmLike:
    pass


@dataclass(frozen=True)
class FmDislike:
    pass


@dataclass(frozen=True)
class CancelCollection:
    pass


@dataclass(frozen=True)
class Search:
    text: str


@dataclass(frozen=True)
class PlayerSubpages:
    pass


@dataclass(frozen=True)
class PlayerFound:
    pass


@dataclass(frozen=True)
class PlayerMine:
    pass


# ---- header / session ------------------------------------------

@dataclass(frozen=True)
class SwitchHeaderBar:
    title: str


@dataclass(frozen=True)
class RefreshHeaderUser:
    pass


@dataclass(frozen=True)
class RefreshHeaderUserLogin:
    login_info: LoginInfo


@dataclass(frozen=True)
class RefreshHeaderUserLogout:
    pass


@dataclass(frozen=True)
class Login:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class DailyTask:
    pass


# ---- playback --------------------------------------------------

@dataclass(frozen=True)
class PlayerInit:
    song: SongInfo
    player_type: PlayerTypes = PlayerTypes.SONG


@dataclass(frozen=True)
class Player:
    song: SongInfo
    url: str


@dataclass(frozen=True)
class RefreshLyrics:
    song_id: int
    lyrics: str


# ---- notifications ---------------------------------------------

@dataclass(frozen=True)
class ShowNotice:
    text: str


Action = Union[
    SwitchStackMain,
    SwitchStackSub,
    SwitchHeaderBar,
    RefreshHeaderUser,
    RefreshHeaderUserLogin,
    RefreshHeaderUserLogout,
    RefreshHome,
    RefreshHomeView,
    RefreshSubUpView,
    RefreshSubLowView,
    RefreshFoundViewInit,
    RefreshFoundView,
    RefreshMine,
    MineHideAll,
    MineShowFm,
    RefreshMineViewInit,
    RefreshMineView,
    RefreshMineFm,
    RefreshMineSidebar,
    PlayerFm,
    FmLike,
    FmDislike,
    RefreshMineFmPlayerList,
    CancelCollection,
    Search,
    PlayerInit,
    Player,
    PlayerSubpages,
    PlayerFound,
    PlayerMine,
    Login,
    Logout,
    ShowNotice,
    DailyTask,
    RefreshLyrics,
]

ACTION_TYPES: tuple[type, ...] = get_args(Action)
