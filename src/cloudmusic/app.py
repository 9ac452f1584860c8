# app.py
from __future__ import annotations

import sqlite3
import sys

from PySide6.QtWidgets import QApplication

from cloudmusic.api.client import MusicApi
from cloudmusic.api.lrclib import LrcLibClient
from cloudmusic.core import actions as act
from cloudmusic.core.channel import channel
from cloudmusic.core.config import AppConfig, get_app_data_dir, load_config
from cloudmusic.core.dispatcher import Dispatcher
from cloudmusic.core.errors import StartupError
from cloudmusic.core.guard import GenerationGuard
from cloudmusic.core.logger import get_logger, setup_logger
from cloudmusic.core.tasks import BackgroundTasks
from cloudmusic.db.database import get_cookies, initialize_database
from cloudmusic.player.player import Player
from cloudmusic.player.wrapper import PlayerWrapper
from cloudmusic.ui.header import Header
from cloudmusic.ui.main_window import MainWindow, require
from cloudmusic.ui.notice import NoticeSlot, Overlay
from cloudmusic.ui.player_bar import PlayerBar
from cloudmusic.ui.view import View

_logger = get_logger("app")

APP_NAME = "cloudmusic-qt"


class App:
    """
    Wires the window, the surfaces and the dispatcher together.

    Construction only builds; nothing runs until `init()`. Any widget the
    surfaces need but cannot find raises StartupError here.
    """

    def __init__(
        self,
        application: QApplication,
        db: sqlite3.Connection,
        config: AppConfig,
        window: MainWindow | None = None,
    ):
        self.application = application
        self.db = db
        self.config = config

        self.sender, receiver = channel()
        self.guard = GenerationGuard()
        self.tasks = BackgroundTasks()

        self.api = MusicApi(config.api_base_url)
        self.api.import_cookies(get_cookies(db))
        self.lyrics = LrcLibClient(config.lrclib_instance)

        self.window = window if window is not None else MainWindow()

        # Notifications first: everything after may want to report through them.
        overlay = require(self.window, Overlay, "overlay")
        bar = require(self.window, PlayerBar, "player_bar")

        self.media = Player()
        self.player = PlayerWrapper(bar, self.media, self.api, self.lyrics, self.sender, self.guard, self.tasks)
        self.view = View(self.window, self.api, db, self.player, self.sender, self.guard, self.tasks)
        self.header = Header(self.window, self.api, db, self.sender, self.guard, self.tasks)
        self.notice = NoticeSlot(overlay)

        self.dispatcher = Dispatcher(
            receiver, self.view, self.header, self.player, self.notice,
            interval_ms=config.poll_interval_ms,
        )
        application.aboutToQuit.connect(self.shutdown)
        self._shut_down = False

    def init(self) -> None:
        self.dispatcher.start()
        self.sender.send(act.RefreshHeaderUser())
        self.sender.send(act.RefreshHome())
        self.window.show()
        _logger.info("started, api=%s", self.config.api_base_url)

    def shutdown(self) -> None:
        if self._shut_down:
            return
        self._shut_down = True
        self.dispatcher.shutdown()
        self.tasks.shutdown(wait=False)
        self.media.stop()


def run(argv: list[str] | None = None) -> int:
    setup_logger()

    qt_app = QApplication(sys.argv if argv is None else argv)
    qt_app.setApplicationName(APP_NAME)

    db = initialize_database(get_app_data_dir())
    config = load_config(db)

    try:
        app = App(qt_app, db, config)
    except StartupError as e:
        _logger.critical("startup failed: %s", e)
        return 1

    app.init()
    code = qt_app.exec()
    db.close()
    return code
