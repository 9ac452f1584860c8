import pytest
from PySide6.QtWidgets import QLabel, QMainWindow

from cloudmusic.app import App
from cloudmusic.core.config import AppConfig
from cloudmusic.core.errors import StartupError
from cloudmusic.core.guard import GenerationGuard
from cloudmusic.ui.header import Header
from cloudmusic.ui.main_window import MainWindow, require
from cloudmusic.ui.notice import Overlay
from cloudmusic.ui.player_bar import PlayerBar

from conftest import FakeApi, ImmediateTasks


def test_main_window_carries_the_named_elements(qtbot):
    window = MainWindow()
    qtbot.addWidget(window)

    assert require(window, Overlay, "overlay") is not None
    assert require(window, PlayerBar, "player_bar") is not None
    assert require(window, QMainWindow, "applicationwindow") is window


def test_require_names_the_missing_element(qtbot):
    window = QMainWindow()
    qtbot.addWidget(window)

    with pytest.raises(StartupError, match="Couldn't get Overlay 'overlay'"):
        require(window, Overlay, "overlay")


def test_app_refuses_a_window_without_its_elements(qapp, qtbot, db):
    window = QMainWindow()
    qtbot.addWidget(window)

    with pytest.raises(StartupError):
        App(qapp, db, AppConfig(), window=window)


def test_header_refuses_a_window_missing_its_title(qtbot, chan, db):
    window = MainWindow()
    qtbot.addWidget(window)
    window.findChild(QLabel, "header_title").setObjectName("renamed")

    with pytest.raises(StartupError):
        Header(window, FakeApi(), db, chan[0], GenerationGuard(), ImmediateTasks())
