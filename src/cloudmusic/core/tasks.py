# core/tasks.py
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from cloudmusic.core.errors import ChannelClosed
from cloudmusic.core.logger import get_logger

_logger = get_logger("tasks")


class BackgroundTasks:
    """
    Thread pool for network and playback work that must stay off the UI thread.

    Tasks talk back to the UI only by sending actions; they never touch widgets.
    """

    def __init__(self, max_workers: int = 4):
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cloudmusic-bg")
        self._closed = False

    def spawn(self, fn: Callable[..., Any], *args: Any) -> Future | None:
        if self._closed:
            _logger.debug("spawn after shutdown ignored: %s", getattr(fn, "__name__", fn))
            return None
        fut = self._pool.submit(fn, *args)
        fut.add_done_callback(self._on_done)
        return fut

    def shutdown(self, wait: bool = False) -> None:
        self._closed = True
        self._pool.shutdown(wait=wait, cancel_futures=True)

    @staticmethod
    def _on_done(fut: Future) -> None:
        if fut.cancelled():
            return
        exc = fut.exception()
        if exc is None:
            return
        if isinstance(exc, ChannelClosed):
            # Shutdown raced with a task that finished late.
            _logger.debug("background result discarded: %s", exc)
            return
        _logger.error("background task failed", exc_info=exc)
