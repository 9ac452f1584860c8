"""Pytest configuration.

Most modules here build PySide6 widgets, so a single `QApplication` is created
for the whole session before collection, and shut down cleanly at the end.
Runs headless via the offscreen platform unless QT_QPA_PLATFORM is already set.
"""

from __future__ import annotations

import os
import queue
from typing import Any

import pytest

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    from PySide6.QtWidgets import QApplication

    global _APP

    app = QApplication.instance()
    if app is None:
        # Keep a strong ref so it isn't GC'd mid-session.
        _APP = QApplication([])
    else:
        _APP = app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


# ---- shared fakes ------------------------------------------------


class Recorder:
    """Stands in for any surface: every method call is appended to `log`."""

    def __init__(self, name: str, log: list):
        self._name = name
        self._log = log

    def __getattr__(self, attr: str):
        if attr.startswith("_"):
            raise AttributeError(attr)

        def call(*args):
            self._log.append((self._name, attr, args))

        return call


class ImmediateTasks:
    """Runs background work inline, so results land in the channel before spawn returns."""

    def spawn(self, fn, *args):
        fn(*args)

    def shutdown(self, wait: bool = False) -> None:
        pass


class DeferredTasks:
    """Holds background work until the test decides to run it."""

    def __init__(self):
        self.pending: list = []

    def spawn(self, fn, *args):
        self.pending.append((fn, args))

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for fn, args in pending:
            fn(*args)

    def run_newest_first(self) -> None:
        pending, self.pending = self.pending, []
        for fn, args in reversed(pending):
            fn(*args)

    def shutdown(self, wait: bool = False) -> None:
        self.pending.clear()


class FakeApi:
    """
    Canned MusicApi. Set an attribute to a value to return it, or to an
    exception instance to raise it.
    """

    def __init__(self, **responses):
        self.responses = responses
        self.calls: list[tuple[str, tuple]] = []

    def __getattr__(self, name: str):
        if name.startswith("_") or name not in self.responses:
            raise AttributeError(name)

        def call(*args, **kwargs):
            self.calls.append((name, args))
            result = self.responses[name]
            if isinstance(result, Exception):
                raise result
            return result

        return call

    def export_cookies(self) -> dict[str, str]:
        return {"MUSIC_U": "token"}

    def clear_cookies(self) -> None:
        self.calls.append(("clear_cookies", ()))


def drain(receiver) -> list:
    out = []
    while True:
        try:
            out.append(receiver.try_recv())
        except queue.Empty:
            return out


@pytest.fixture
def chan():
    from cloudmusic.core.channel import channel

    sender, receiver = channel()
    yield sender, receiver
    receiver.close()


@pytest.fixture
def db(tmp_path):
    from cloudmusic.db.database import initialize_database

    conn = initialize_database(str(tmp_path))
    yield conn
    conn.close()


@pytest.fixture
def songs():
    from cloudmusic.core.models import SongInfo

    return [
        SongInfo(id=101, name="Intro", singer="Band", album="First", pic_url="", duration_ms=61_000),
        SongInfo(id=102, name="Second", singer="Band", album="First", pic_url="", duration_ms=185_000),
        SongInfo(id=103, name="Outro", singer="Band", album="First", pic_url="", duration_ms=92_000),
    ]
