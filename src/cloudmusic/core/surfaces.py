# core/surfaces.py
"""Contracts the dispatcher relies on. The Qt widgets in `cloudmusic.ui` implement them."""
from __future__ import annotations

from typing import Protocol

from cloudmusic.core.models import LoginInfo, PlayerTypes, SongInfo, SongList


class ViewSurface(Protocol):
    def update_home(self) -> None: ...
    def update_home_view(self, top_song_lists: list[SongList], recommended: list[SongList]) -> None: ...
    def update_sub_up_view(self, name: str, image_path: str) -> None: ...
    def update_sub_low_view(self, songs: list[SongInfo]) -> None: ...
    def switch_stack_main(self) -> None: ...
    def switch_stack_sub(self, id: int, name: str, image_path: str) -> None: ...
    def switch_stack_search(self, text: str) -> None: ...
    def update_found_view_data(self, chart_id: int) -> None: ...
    def update_found_view(self, songs: list[SongInfo]) -> None: ...
    def mine_init(self) -> None: ...
    def mine_hide_all(self) -> None: ...
    def mine_show_fm(self) -> None: ...
    def update_mine_view_data(self, row: int) -> None: ...
    def update_mine_view(self, songs: list[SongInfo], title: str) -> None: ...
    def update_mine_fm(self, song: SongInfo) -> None: ...
    def update_mine_sidebar(self, song_lists: list[SongList]) -> None: ...
    def refresh_fm_player_list(self) -> None: ...
    def play_fm(self) -> None: ...
    def like_fm(self) -> None: ...
    def dislike_fm(self) -> None: ...
    def cancel_collection(self) -> None: ...
    def play_subpages(self) -> None: ...
    def play_found(self) -> None: ...
    def play_mine(self) -> None: ...


class HeaderSurface(Protocol):
    def switch_header(self, title: str) -> None: ...
    def update_user_button(self) -> None: ...
    def update_user_login(self, login_info: LoginInfo) -> None: ...
    def update_user_logout(self) -> None: ...
    def login(self, username: str, password: str) -> None: ...
    def logout(self) -> None: ...
    def daily_task(self) -> None: ...


class PlayerSurface(Protocol):
    def initialize_player(self, song: SongInfo, player_type: PlayerTypes) -> None: ...
    def player(self, song: SongInfo, url: str) -> None: ...
    def forward(self) -> None: ...
    def update_lyrics(self, song_id: int, lyrics: str) -> None: ...


class NoticeSurface(Protocol):
    def show(self, text: str) -> None: ...
