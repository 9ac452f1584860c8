# core/dispatcher.py
"""
UI-thread dispatcher.

Background producers push actions through the channel; a QTimer on the UI
thread calls `poll_once()` on a fixed cadence. Each tick applies at most one
action, so a burst of results can never stall the interface. Handlers run
synchronously and may send further actions; those land on later ticks.
"""
from __future__ import annotations

import queue
from enum import Enum, auto
from typing import assert_never

from PySide6.QtCore import QCoreApplication, QObject, QTimer

from cloudmusic.core import actions as act
from cloudmusic.core.actions import Action
from cloudmusic.core.channel import ActionReceiver
from cloudmusic.core.config import DEFAULT_POLL_INTERVAL_MS
from cloudmusic.core.errors import ChannelClosed, DispatcherInvariantError
from cloudmusic.core.logger import get_logger
from cloudmusic.core.surfaces import HeaderSurface, NoticeSurface, PlayerSurface, ViewSurface

_logger = get_logger("dispatcher")

EXIT_INVARIANT = 70


class PollResult(Enum):
    CONTINUE = auto()
    STOP = auto()


class Dispatcher(QObject):
    def __init__(
        self,
        receiver: ActionReceiver,
        view: ViewSurface,
        header: HeaderSurface,
        player: PlayerSurface,
        notice: NoticeSurface,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._receiver = receiver
        self.view = view
        self.header = header
        self.player = player
        self.notice = notice
        self._stopping = False

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self._on_tick)

    # ---- lifecycle -----------------------------------------------

    def start(self) -> None:
        if self._stopping:
            return
        self._timer.start()

    def is_running(self) -> bool:
        return self._timer.isActive()

    def shutdown(self) -> None:
        """Deliberate stop: closes the channel so late producers fail fast."""
        if self._stopping:
            return
        self._stopping = True
        self._timer.stop()
        self._receiver.close()
        _logger.info("dispatcher stopped")

    def _on_tick(self) -> None:
        try:
            result = self.poll_once()
        except DispatcherInvariantError:
            _logger.critical("action channel vanished while the application is running", exc_info=True)
            self._timer.stop()
            QCoreApplication.exit(EXIT_INVARIANT)
            return
        if result is PollResult.STOP:
            self._timer.stop()

    # ---- polling -------------------------------------------------

    def poll_once(self) -> PollResult:
        try:
            action = self._receiver.try_recv()
        except queue.Empty:
            return PollResult.CONTINUE
        except ChannelClosed as e:
            if self._stopping:
                return PollResult.STOP
            raise DispatcherInvariantError("action channel closed outside shutdown") from e

        _logger.debug("incoming action: %r", action)
        self.dispatch(action)
        return PollResult.CONTINUE

    def dispatch(self, action: Action) -> None:
        match action:
            case act.SwitchHeaderBar(title=title):
                self.header.switch_header(title)
            case act.RefreshHeaderUser():
                self.header.update_user_button()
            case act.RefreshHeaderUserLogin(login_info=info):
                self.header.update_user_login(info)
            case act.RefreshHeaderUserLogout():
                self.header.update_user_logout()
            case act.RefreshHome():
                self.view.update_home()
            case act.RefreshHomeView(top_song_lists=tsl, recommended=rr):
                self.view.update_home_view(tsl, rr)
            case act.RefreshSubUpView(name=name, image_path=image_path):
                self.view.update_sub_up_view(name, image_path)
            case act.RefreshSubLowView(songs=songs):
                self.view.update_sub_low_view(songs)
            case act.SwitchStackMain():
                self.view.switch_stack_main()
            case act.SwitchStackSub(id=id_, name=name, image_path=image_path):
                self.view.switch_stack_sub(id_, name, image_path)
            case act.RefreshFoundViewInit(chart_id=chart_id):
                self.view.update_found_view_data(chart_id)
            case act.RefreshFoundView(songs=songs):
                self.view.update_found_view(songs)
            case act.RefreshMine():
                self.view.mine_init()
            case act.MineHideAll():
                self.view.mine_hide_all()
            case act.MineShowFm():
                self.view.mine_show_fm()
            case act.RefreshMineViewInit(row=row):
                self.view.update_mine_view_data(row)
            case act.RefreshMineView(songs=songs, title=title):
                self.view.update_mine_view(songs, title)
            case act.RefreshMineFm(song=song):
                self.view.update_mine_fm(song)
            case act.RefreshMineSidebar(song_lists=song_lists):
                self.view.update_mine_sidebar(song_lists)
            case act.RefreshMineFmPlayerList():
                self.view.refresh_fm_player_list()
            case act.PlayerFm():
                self.view.play_fm()
            case act.FmLike():
                self.view.like_fm()
            case act.FmDislike():
                # Skip the disliked song right away; the report goes out in the background.
                self.player.forward()
                self.view.dislike_fm()
            case act.CancelCollection():
                self.view.cancel_collection()
            case act.Search(text=text):
                self.view.switch_stack_search(text)
            case act.Login(username=username, password=password):
                self.header.login(username, password)
            case act.Logout():
                self.header.logout()
            case act.DailyTask():
                self.header.daily_task()
            case act.PlayerInit(song=song, player_type=player_type):
                self.player.initialize_player(song, player_type)
            case act.Player(song=song, url=url):
                self.player.player(song, url)
            case act.RefreshLyrics(song_id=song_id, lyrics=lyrics):
                self.player.update_lyrics(song_id, lyrics)
            case act.ShowNotice(text=text):
                self.notice.show(text)
            case act.PlayerSubpages():
                self.view.play_subpages()
            case act.PlayerFound():
                self.view.play_found()
            case act.PlayerMine():
                self.view.play_mine()
            case _:
                assert_never(action)
