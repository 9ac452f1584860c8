# ui/header.py
from __future__ import annotations

import sqlite3

from PySide6.QtWidgets import QLabel, QLineEdit, QTabWidget, QToolButton, QWidget

from cloudmusic.api.client import MusicApi
from cloudmusic.core import actions as act
from cloudmusic.core.channel import ActionSender
from cloudmusic.core.errors import ApiError
from cloudmusic.core.guard import SESSION_LANE, GenerationGuard
from cloudmusic.core.logger import get_logger
from cloudmusic.core.models import LoginInfo
from cloudmusic.core.tasks import BackgroundTasks
from cloudmusic.db.database import clear_login_info, get_login_info, save_login_info
from cloudmusic.ui.dialogs.login_dialog import LoginDialog
from cloudmusic.ui.main_window import APP_TITLE, TAB_MINE, require

_logger = get_logger("header")

ALREADY_CHECKED_IN = -2


class Header:
    """Title bar, search box and the signed-in user."""

    def __init__(
        self,
        window: QWidget,
        api: MusicApi,
        db: sqlite3.Connection,
        sender: ActionSender,
        guard: GenerationGuard,
        tasks: BackgroundTasks,
    ):
        self.window = window
        self.api = api
        self.db = db
        self.sender = sender
        self.guard = guard
        self.tasks = tasks
        self.login_info: LoginInfo | None = None

        self.title = require(window, QLabel, "header_title")
        self.btn_back = require(window, QToolButton, "header_back")
        self.search = require(window, QLineEdit, "header_search")
        self.btn_user = require(window, QToolButton, "header_user")
        self.btn_logout = require(window, QToolButton, "header_logout")
        self.btn_daily = require(window, QToolButton, "header_daily")
        self.tabs = require(window, QTabWidget, "main_tabs")

        self.btn_back.clicked.connect(lambda: self.sender.send(act.SwitchStackMain()))
        self.search.returnPressed.connect(self._on_search)
        self.btn_user.clicked.connect(self._on_user_clicked)
        self.btn_logout.clicked.connect(lambda: self.sender.send(act.Logout()))
        self.btn_daily.clicked.connect(lambda: self.sender.send(act.DailyTask()))

    # ---- UI events -----------------------------------------------

    def _on_search(self):
        text = self.search.text().strip()
        if text:
            self.sender.send(act.Search(text))

    def _on_user_clicked(self):
        if self.login_info is not None:
            self.sender.send(act.SwitchStackMain())
            if self.tabs.currentIndex() == TAB_MINE:
                self.sender.send(act.RefreshMine())
            else:
                # The tab change itself asks for RefreshMine.
                self.tabs.setCurrentIndex(TAB_MINE)
            return
        dlg = LoginDialog(self.window)
        if dlg.exec():
            username, password = dlg.credentials()
            self.sender.send(act.Login(username, password))

    # ---- surface API ---------------------------------------------

    def switch_header(self, title: str) -> None:
        self.title.setText(title)
        self.btn_back.setVisible(title != APP_TITLE)

    def update_user_button(self) -> None:
        generation = self.guard.current_generation(SESSION_LANE)
        self.tasks.spawn(self._check_session, generation)

    def update_user_login(self, login_info: LoginInfo) -> None:
        # Only current session results get here, so this is the one place the
        # session is written.
        save_login_info(self.db, login_info, self.api.export_cookies())
        self.login_info = login_info
        self.btn_user.setText(login_info.nickname or "Me")
        self.btn_user.setToolTip(f"Signed in as {login_info.nickname}")
        self.btn_logout.setVisible(True)
        self.btn_daily.setVisible(True)

    def update_user_logout(self) -> None:
        clear_login_info(self.db)
        self.api.clear_cookies()
        self.login_info = None
        self.btn_user.setText("Log in")
        self.btn_user.setToolTip("")
        self.btn_logout.setVisible(False)
        self.btn_daily.setVisible(False)

    def login(self, username: str, password: str) -> None:
        generation = self.guard.advance(SESSION_LANE)
        self.tasks.spawn(self._login, username, password, generation)

    def logout(self) -> None:
        generation = self.guard.advance(SESSION_LANE)
        self.tasks.spawn(self._logout, generation)

    def daily_task(self) -> None:
        self.tasks.spawn(self._daily_task)

    # ---- background ----------------------------------------------

    def _send(self, generation: int, action: act.Action) -> bool:
        return self.guard.send_if_current(self.sender, generation, action, SESSION_LANE)

    def _check_session(self, generation: int) -> None:
        stored = get_login_info(self.db)
        if stored is None:
            self._send(generation, act.RefreshHeaderUserLogout())
            return
        try:
            live = self.api.login_status()
        except ApiError as e:
            # Offline: trust what we stored last time.
            _logger.warning("login status check failed, using stored session: %s", e)
            self._send(generation, act.RefreshHeaderUserLogin(stored))
            return

        if live is None:
            if self._send(generation, act.RefreshHeaderUserLogout()):
                self.sender.send(act.ShowNotice("Your session expired, please log in again."))
            return
        self._send(generation, act.RefreshHeaderUserLogin(live))

    def _login(self, username: str, password: str, generation: int) -> None:
        try:
            info = self.api.login(username, password)
        except ApiError as e:
            self._send(generation, act.ShowNotice(f"Login failed: {e}"))
            return

        if self._send(generation, act.RefreshHeaderUserLogin(info)):
            self.sender.send(act.RefreshMine())
            self.sender.send(act.ShowNotice(f"Welcome back, {info.nickname}!"))

    def _logout(self, generation: int) -> None:
        try:
            self.api.logout()
        except ApiError as e:
            # The local session goes away regardless.
            _logger.warning("logout request failed: %s", e)

        if self._send(generation, act.RefreshHeaderUserLogout()):
            self.sender.send(act.MineHideAll())
            self.sender.send(act.ShowNotice("Logged out."))

    def _daily_task(self) -> None:
        try:
            points = self.api.daily_task()
        except ApiError as e:
            if e.code == ALREADY_CHECKED_IN:
                self.sender.send(act.ShowNotice("Already checked in today."))
            else:
                self.sender.send(act.ShowNotice(f"Check-in failed: {e}"))
            return
        self.sender.send(act.ShowNotice(f"Checked in, +{points} points."))
