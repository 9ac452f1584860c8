# ui/main_window.py
"""
The fully built interactive surface.

Every widget a surface needs carries an object name; the surfaces look them up
with `require()`, so a missing element fails startup instead of limping on.
"""
from __future__ import annotations

from typing import TypeVar

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QLineEdit, QListWidget, QMainWindow,
    QPushButton, QSplitter, QStackedWidget, QTabBar, QTabWidget, QToolButton,
    QVBoxLayout, QWidget,
)

from cloudmusic.api.client import TOP_CHARTS
from cloudmusic.core.errors import StartupError
from cloudmusic.core.logger import get_logger
from cloudmusic.ui.notice import Overlay
from cloudmusic.ui.player_bar import PlayerBar
from cloudmusic.ui.widgets.song_list_widget import SongListWidget
from cloudmusic.ui.widgets.song_table_widget import SongTableWidget

_logger = get_logger("ui")

APP_TITLE = "Cloud Music"

PAGE_MAIN = 0
PAGE_SUB = 1

TAB_HOME = 0
TAB_FOUND = 1
TAB_MINE = 2

MINE_HINT = 0
MINE_FM = 1
MINE_LIST = 2

W = TypeVar("W", bound=QWidget)


def require(root: QWidget, cls: type[W], name: str) -> W:
    if root.objectName() == name and isinstance(root, cls):
        return root
    w = root.findChild(cls, name)
    if w is None:
        raise StartupError(f"Couldn't get {cls.__name__} '{name}'")
    return w


def _named(w: W, name: str) -> W:
    w.setObjectName(name)
    return w


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setObjectName("applicationwindow")
        self.setWindowTitle(APP_TITLE)
        self.resize(1000, 680)

        central = _named(QWidget(), "central")
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        root.addWidget(self._build_header())

        stack = _named(QStackedWidget(), "stack")
        stack.insertWidget(PAGE_MAIN, self._build_main_tabs())
        stack.insertWidget(PAGE_SUB, self._build_sub_page())
        root.addWidget(stack, 1)

        root.addWidget(PlayerBar())

        Overlay(central)

    # ---- header --------------------------------------------------

    def _build_header(self) -> QWidget:
        bar = _named(QWidget(), "header")
        row = QHBoxLayout(bar)
        row.setContentsMargins(8, 6, 8, 6)

        back = _named(QToolButton(), "header_back")
        back.setText("←")
        back.setToolTip("Back")
        back.setVisible(False)
        row.addWidget(back)

        row.addWidget(_named(QLabel(APP_TITLE), "header_title"))
        row.addStretch(1)

        search = _named(QLineEdit(), "header_search")
        search.setPlaceholderText("Search songs…")
        search.setClearButtonEnabled(True)
        row.addWidget(search, 1)

        daily = _named(QToolButton(), "header_daily")
        daily.setText("Check in")
        daily.setVisible(False)
        row.addWidget(daily)

        user = _named(QToolButton(), "header_user")
        user.setText("Log in")
        row.addWidget(user)

        logout = _named(QToolButton(), "header_logout")
        logout.setText("Log out")
        logout.setVisible(False)
        row.addWidget(logout)

        return bar

    # ---- pages ---------------------------------------------------

    def _build_main_tabs(self) -> QWidget:
        tabs = _named(QTabWidget(), "main_tabs")

        home = QWidget()
        home_layout = QVBoxLayout(home)
        home_layout.addWidget(QLabel("Top playlists"))
        home_layout.addWidget(_named(SongListWidget(), "home_top_lists"), 1)
        home_layout.addWidget(QLabel("Recommended"))
        home_layout.addWidget(_named(SongListWidget(), "home_recommended"), 1)
        tabs.addTab(home, "Home")

        found = QWidget()
        found_layout = QVBoxLayout(found)
        top = QHBoxLayout()
        charts = _named(QTabBar(), "found_charts")
        for _, title in TOP_CHARTS:
            charts.addTab(title)
        top.addWidget(charts, 1)
        top.addWidget(_named(QPushButton("Play all"), "found_play"))
        found_layout.addLayout(top)
        found_layout.addWidget(_named(SongTableWidget(), "found_tracks"), 1)
        tabs.addTab(found, "Charts")

        mine = QSplitter(Qt.Orientation.Horizontal)
        mine.addWidget(_named(QListWidget(), "mine_sidebar"))
        content = _named(QStackedWidget(), "mine_content")

        hint = _named(QLabel("Log in to see your music."), "mine_login_hint")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        content.insertWidget(MINE_HINT, hint)

        fm = _named(QWidget(), "mine_fm_panel")
        fm_layout = QVBoxLayout(fm)
        fm_title = _named(QLabel("Personal FM"), "mine_fm_title")
        fm_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        fm_layout.addWidget(fm_title, 1)
        fm_buttons = QHBoxLayout()
        fm_buttons.addStretch(1)
        fm_buttons.addWidget(_named(QPushButton("Play"), "mine_fm_play"))
        fm_buttons.addWidget(_named(QPushButton("Like"), "mine_fm_like"))
        fm_buttons.addWidget(_named(QPushButton("Not interested"), "mine_fm_dislike"))
        fm_buttons.addStretch(1)
        fm_layout.addLayout(fm_buttons)
        content.insertWidget(MINE_FM, fm)

        lst = QWidget()
        lst_layout = QVBoxLayout(lst)
        head = QHBoxLayout()
        head.addWidget(_named(QLabel(""), "mine_title"), 1)
        head.addWidget(_named(QPushButton("Play all"), "mine_play"))
        lst_layout.addLayout(head)
        lst_layout.addWidget(_named(SongTableWidget(), "mine_tracks"), 1)
        content.insertWidget(MINE_LIST, lst)

        mine.addWidget(content)
        mine.setStretchFactor(0, 1)
        mine.setStretchFactor(1, 3)
        tabs.addTab(mine, "Mine")

        return tabs

    def _build_sub_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        head = QHBoxLayout()
        head.addWidget(_named(QLabel(""), "sub_title"), 1)
        head.addWidget(_named(QPushButton("Play all"), "sub_play"))
        uncollect = _named(QPushButton("Remove from my playlists"), "sub_uncollect")
        uncollect.setVisible(False)
        head.addWidget(uncollect)
        layout.addLayout(head)
        layout.addWidget(_named(SongTableWidget(), "sub_tracks"), 1)
        return page

    # ---- window --------------------------------------------------

    def closeEvent(self, event):
        _logger.info("Application is exiting")
        # quitOnLastWindowClosed ends the event loop.
        super().closeEvent(event)
