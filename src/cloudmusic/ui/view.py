# ui/view.py
"""
Navigation / content surface.

Every page load runs on the background pool and is single-flight per page:
the load captures a fresh generation for its lane, and its result action is
only sent if no newer load of the same page started meanwhile.
"""
from __future__ import annotations

import sqlite3
from typing import Callable, TypeVar

from PySide6.QtWidgets import (
    QLabel, QListWidget, QPushButton, QStackedWidget, QTabBar, QTabWidget, QWidget,
)

from cloudmusic.api.client import MusicApi
from cloudmusic.core import actions as act
from cloudmusic.core.channel import ActionSender
from cloudmusic.core.errors import ApiError
from cloudmusic.core.guard import GenerationGuard
from cloudmusic.core.logger import get_logger
from cloudmusic.core.models import PlayerTypes, SongInfo, SongList
from cloudmusic.core.tasks import BackgroundTasks
from cloudmusic.db.database import get_login_info
from cloudmusic.player.wrapper import PlayerWrapper
from cloudmusic.ui.main_window import (
    APP_TITLE, MINE_FM, MINE_HINT, MINE_LIST, PAGE_MAIN, PAGE_SUB, TAB_FOUND, TAB_HOME, TAB_MINE, require,
)
from cloudmusic.ui.widgets.song_list_widget import SongListWidget
from cloudmusic.ui.widgets.song_table_widget import SongTableWidget

_logger = get_logger("view")

HOME_LANE = "view.home"
SUB_LANE = "view.sub"
FOUND_LANE = "view.found"
MINE_LANE = "view.mine"
MINE_LIST_LANE = "view.mine_list"
FM_LANE = "view.fm"

FM_ROW = 0
DAILY_ROW = 1
FIXED_SIDEBAR_ROWS = ["Personal FM", "Daily recommendations"]

T = TypeVar("T")


class View:
    def __init__(
        self,
        window: QWidget,
        api: MusicApi,
        db: sqlite3.Connection,
        player: PlayerWrapper,
        sender: ActionSender,
        guard: GenerationGuard,
        tasks: BackgroundTasks,
    ):
        self.api = api
        self.db = db
        self.player = player
        self.sender = sender
        self.guard = guard
        self.tasks = tasks

        self.stack = require(window, QStackedWidget, "stack")
        self.tabs = require(window, QTabWidget, "main_tabs")

        self.home_top = require(window, SongListWidget, "home_top_lists")
        self.home_recommended = require(window, SongListWidget, "home_recommended")

        self.sub_title = require(window, QLabel, "sub_title")
        self.sub_play = require(window, QPushButton, "sub_play")
        self.sub_uncollect = require(window, QPushButton, "sub_uncollect")
        self.sub_tracks = require(window, SongTableWidget, "sub_tracks")

        self.found_charts = require(window, QTabBar, "found_charts")
        self.found_play = require(window, QPushButton, "found_play")
        self.found_tracks = require(window, SongTableWidget, "found_tracks")

        self.mine_sidebar = require(window, QListWidget, "mine_sidebar")
        self.mine_content = require(window, QStackedWidget, "mine_content")
        self.mine_fm_title = require(window, QLabel, "mine_fm_title")
        self.mine_fm_play = require(window, QPushButton, "mine_fm_play")
        self.mine_fm_like = require(window, QPushButton, "mine_fm_like")
        self.mine_fm_dislike = require(window, QPushButton, "mine_fm_dislike")
        self.mine_title = require(window, QLabel, "mine_title")
        self.mine_play = require(window, QPushButton, "mine_play")
        self.mine_tracks = require(window, SongTableWidget, "mine_tracks")

        self.sub_id: int | None = None
        self.sub_image_path: str = ""
        self.chart_id: int = 0
        self.fm_song: SongInfo | None = None
        self.fm_autoplay = False
        self.user_lists: list[SongList] = []
        self.home_loaded = False

        self._wire()

    def _wire(self) -> None:
        send = self.sender.send

        def open_list(sl: SongList):
            send(act.SwitchStackSub.of((sl.id, sl.name, sl.cover_img_url)))

        self.home_top.openSongList.connect(open_list)
        self.home_recommended.openSongList.connect(open_list)
        self.tabs.currentChanged.connect(self._on_tab_changed)
        self.found_charts.currentChanged.connect(lambda idx: send(act.RefreshFoundViewInit(int(idx))))
        self.mine_sidebar.currentRowChanged.connect(self._on_sidebar_row)

        self.sub_play.clicked.connect(lambda: send(act.PlayerSubpages()))
        self.found_play.clicked.connect(lambda: send(act.PlayerFound()))
        self.mine_play.clicked.connect(lambda: send(act.PlayerMine()))
        self.sub_uncollect.clicked.connect(lambda: send(act.CancelCollection()))
        self.mine_fm_play.clicked.connect(lambda: send(act.PlayerFm()))
        self.mine_fm_like.clicked.connect(lambda: send(act.FmLike()))
        self.mine_fm_dislike.clicked.connect(lambda: send(act.FmDislike()))

        for table in (self.sub_tracks, self.found_tracks, self.mine_tracks):
            table.playSong.connect(lambda row, t=table: self._play_list(t.songs(), row))
        self.player.media.trackChanged.connect(self._on_track_changed)

    def _on_tab_changed(self, idx: int) -> None:
        if idx == TAB_HOME and not self.home_loaded:
            self.sender.send(act.RefreshHome())
        elif idx == TAB_FOUND and not self.found_tracks.songs():
            self.sender.send(act.RefreshFoundViewInit(self.chart_id))
        elif idx == TAB_MINE:
            self.sender.send(act.RefreshMine())

    def _on_track_changed(self, song: SongInfo | None) -> None:
        song_id = song.id if song is not None else None
        for table in (self.sub_tracks, self.found_tracks, self.mine_tracks):
            table.set_now_playing(song_id)

    def _on_sidebar_row(self, row: int) -> None:
        if row >= 0:
            self.sender.send(act.RefreshMineViewInit(row))

    # ---- background loading --------------------------------------

    def _load(self, lane: str, what: str, fetch: Callable[[], T], make_action: Callable[[T], act.Action]) -> int:
        generation = self.guard.advance(lane)
        self.tasks.spawn(self._run_load, lane, generation, what, fetch, make_action)
        return generation

    def _run_load(self, lane, generation, what, fetch, make_action) -> None:
        try:
            result = fetch()
        except ApiError as e:
            self.guard.send_if_current(self.sender, generation, act.ShowNotice(f"Failed to load {what}: {e}"), lane)
            return
        self.guard.send_if_current(self.sender, generation, make_action(result), lane)

    def _run_action(self, call: Callable[[], None], ok_text: str, fail_text: str, *then: act.Action) -> None:
        try:
            call()
        except ApiError as e:
            self.sender.send(act.ShowNotice(f"{fail_text}: {e}"))
            return
        self.sender.send(act.ShowNotice(ok_text))
        for action in then:
            self.sender.send(action)

    # ---- home ----------------------------------------------------

    def update_home(self) -> None:
        api = self.api
        self._load(
            HOME_LANE, "home page",
            lambda: (api.top_song_lists(), api.recommend_resource()),
            lambda res: act.RefreshHomeView(res[0], res[1]),
        )

    def update_home_view(self, top_song_lists: list[SongList], recommended: list[SongList]) -> None:
        self.home_top.set_rows(top_song_lists)
        self.home_recommended.set_rows(recommended)
        self.home_loaded = True

    # ---- stack navigation ----------------------------------------

    def switch_stack_main(self) -> None:
        # Anything still loading for the sub page is now irrelevant.
        self.guard.advance(SUB_LANE)
        self.stack.setCurrentIndex(PAGE_MAIN)
        self.sender.send(act.SwitchHeaderBar(APP_TITLE))

    def switch_stack_sub(self, id: int, name: str, image_path: str) -> None:
        self.sub_id = id
        self.sub_tracks.set_songs([])
        self.sub_uncollect.setVisible(any(sl.id == id for sl in self.user_lists))
        self.stack.setCurrentIndex(PAGE_SUB)

        self.sender.send(act.SwitchHeaderBar(name))
        self.sender.send(act.RefreshSubUpView(name, image_path))
        api = self.api
        self._load(SUB_LANE, name, lambda: api.song_list_detail(id), act.RefreshSubLowView)

    def switch_stack_search(self, text: str) -> None:
        self.sub_id = None
        self.sub_tracks.set_songs([])
        self.sub_uncollect.setVisible(False)
        self.stack.setCurrentIndex(PAGE_SUB)

        title = f"Search: {text}"
        self.sender.send(act.SwitchHeaderBar(title))
        self.sender.send(act.RefreshSubUpView(title, ""))
        api = self.api
        self._load(SUB_LANE, "search results", lambda: api.search(text), act.RefreshSubLowView)

    def update_sub_up_view(self, name: str, image_path: str) -> None:
        self.sub_title.setText(name)
        self.sub_title.setToolTip(image_path)
        self.sub_image_path = image_path

    def update_sub_low_view(self, songs: list[SongInfo]) -> None:
        self.sub_tracks.set_songs(songs)

    # ---- charts --------------------------------------------------

    def update_found_view_data(self, chart_id: int) -> None:
        self.chart_id = chart_id
        self.found_tracks.set_songs([])
        api = self.api
        self._load(FOUND_LANE, "chart", lambda: api.chart_detail(chart_id), act.RefreshFoundView)

    def update_found_view(self, songs: list[SongInfo]) -> None:
        self.found_tracks.set_songs(songs)

    # ---- mine ----------------------------------------------------

    def mine_init(self) -> None:
        generation = self.guard.advance(MINE_LANE)
        self.tasks.spawn(self._load_mine, generation)

    def _load_mine(self, generation: int) -> None:
        info = get_login_info(self.db)
        if info is None:
            self.guard.send_if_current(self.sender, generation, act.MineHideAll(), MINE_LANE)
            return
        self._run_load(
            MINE_LANE, generation, "your playlists",
            lambda: self.api.user_song_lists(info.uid),
            act.RefreshMineSidebar,
        )

    def mine_hide_all(self) -> None:
        self.user_lists = []
        self.mine_sidebar.blockSignals(True)
        self.mine_sidebar.clear()
        self.mine_sidebar.blockSignals(False)
        self.mine_sidebar.setVisible(False)
        self.mine_tracks.set_songs([])
        self.mine_content.setCurrentIndex(MINE_HINT)

    def update_mine_sidebar(self, song_lists: list[SongList]) -> None:
        self.user_lists = list(song_lists)
        self.mine_sidebar.blockSignals(True)
        self.mine_sidebar.clear()
        self.mine_sidebar.addItems(FIXED_SIDEBAR_ROWS + [sl.name for sl in self.user_lists])
        self.mine_sidebar.setCurrentRow(FM_ROW)
        self.mine_sidebar.blockSignals(False)
        self.mine_sidebar.setVisible(True)
        self.sender.send(act.RefreshMineViewInit(FM_ROW))

    def mine_show_fm(self) -> None:
        self.mine_content.setCurrentIndex(MINE_FM)
        if self.fm_song is None:
            self.sender.send(act.RefreshMineFmPlayerList())

    def update_mine_view_data(self, row: int) -> None:
        if row == FM_ROW:
            self.sender.send(act.MineShowFm())
            return

        api = self.api
        if row == DAILY_ROW:
            title, fetch = FIXED_SIDEBAR_ROWS[DAILY_ROW], api.recommend_songs
        elif 0 <= row - len(FIXED_SIDEBAR_ROWS) < len(self.user_lists):
            sl = self.user_lists[row - len(FIXED_SIDEBAR_ROWS)]
            title, fetch = sl.name, (lambda: api.song_list_detail(sl.id))
        else:
            _logger.debug("sidebar row %d out of range", row)
            return

        self.mine_title.setText(title)
        self.mine_tracks.set_songs([])
        self.mine_content.setCurrentIndex(MINE_LIST)
        self._load(MINE_LIST_LANE, title, fetch, lambda songs: act.RefreshMineView(songs, title))

    def update_mine_view(self, songs: list[SongInfo], title: str) -> None:
        self.mine_title.setText(title)
        self.mine_tracks.set_songs(songs)

    # ---- personal FM ---------------------------------------------

    def refresh_fm_player_list(self) -> None:
        self._load(FM_LANE, "personal FM", self.api.personal_fm, self._first_fm_song)

    @staticmethod
    def _first_fm_song(songs: list[SongInfo]) -> act.Action:
        if not songs:
            return act.ShowNotice("Personal FM has nothing for you right now.")
        return act.RefreshMineFm(songs[0])

    def update_mine_fm(self, song: SongInfo) -> None:
        self.fm_song = song
        self.mine_fm_title.setText(song.display_title())
        if self.fm_autoplay:
            self.sender.send(act.PlayerFm())

    def play_fm(self) -> None:
        self.fm_autoplay = True
        if self.fm_song is None:
            self.sender.send(act.RefreshMineFmPlayerList())
            return
        self.player.set_playlist([self.fm_song], PlayerTypes.FM)
        self.sender.send(act.PlayerInit(self.fm_song, PlayerTypes.FM))

    def like_fm(self) -> None:
        song = self.fm_song
        if song is None:
            return
        self.tasks.spawn(self._run_action, lambda: self.api.like(song.id), "Added to favorites", "Like failed")

    def dislike_fm(self) -> None:
        song = self.fm_song
        if song is None:
            return
        self.fm_song = None
        if self.player.player_type is not PlayerTypes.FM:
            # Nothing to skip in the player; just move FM on.
            self.sender.send(act.RefreshMineFmPlayerList())
        self.tasks.spawn(
            self._run_action, lambda: self.api.fm_trash(song.id), "Won't recommend this again", "Dislike failed"
        )

    # ---- collection ----------------------------------------------

    def cancel_collection(self) -> None:
        sub_id = self.sub_id
        if sub_id is None:
            return
        self.sub_uncollect.setVisible(False)
        self.tasks.spawn(
            self._run_action,
            lambda: self.api.unsubscribe_song_list(sub_id),
            "Removed from your playlists",
            "Could not remove playlist",
            act.RefreshMine(),
        )

    # ---- playback ------------------------------------------------

    def _play_list(self, songs: list[SongInfo], start: int = 0) -> None:
        if not songs:
            self.sender.send(act.ShowNotice("Nothing to play here yet."))
            return
        start = start if 0 <= start < len(songs) else 0
        self.fm_autoplay = False
        self.player.set_playlist(songs, PlayerTypes.SONG, start)
        self.sender.send(act.PlayerInit(songs[start], PlayerTypes.SONG))

    def play_subpages(self) -> None:
        self._play_list(self.sub_tracks.songs())

    def play_found(self) -> None:
        self._play_list(self.found_tracks.songs())

    def play_mine(self) -> None:
        self._play_list(self.mine_tracks.songs())
