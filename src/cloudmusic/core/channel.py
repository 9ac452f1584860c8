# core/channel.py
"""
Multi-producer / single-consumer action channel.

Any thread may `send()`; only the dispatcher on the UI thread calls
`try_recv()`. The queue is unbounded so a producer never waits on the consumer.
Actions from one producer come out in the order that producer sent them.
"""
from __future__ import annotations

import queue
import threading

from cloudmusic.core.actions import Action
from cloudmusic.core.errors import ChannelClosed
from cloudmusic.core.logger import get_logger

_logger = get_logger("channel")


class _Channel:
    def __init__(self):
        self.queue: "queue.SimpleQueue[Action]" = queue.SimpleQueue()
        self.closed = threading.Event()


class ActionSender:
    """Producer handle. Cheap to share between threads and surfaces."""

    def __init__(self, chan: _Channel):
        self._chan = chan

    def send(self, action: Action) -> None:
        if self._chan.closed.is_set():
            raise ChannelClosed(f"cannot send {type(action).__name__}: channel closed")
        self._chan.queue.put_nowait(action)

    def is_closed(self) -> bool:
        return self._chan.closed.is_set()


class ActionReceiver:
    """Consumer handle. Owned by the dispatcher."""

    def __init__(self, chan: _Channel):
        self._chan = chan

    def try_recv(self) -> Action:
        """
        Returns the next pending action.

        Raises queue.Empty when nothing is pending and ChannelClosed once
        the channel has been closed.
        """
        if self._chan.closed.is_set():
            raise ChannelClosed("action channel closed")
        return self._chan.queue.get_nowait()

    def pending(self) -> int:
        return self._chan.queue.qsize()

    def close(self) -> None:
        if self._chan.closed.is_set():
            return
        self._chan.closed.set()

        dropped = 0
        while True:
            try:
                self._chan.queue.get_nowait()
            except queue.Empty:
                break
            dropped += 1
        if dropped:
            _logger.debug("channel closed with %d pending action(s) dropped", dropped)

    def is_closed(self) -> bool:
        return self._chan.closed.is_set()


def channel() -> tuple[ActionSender, ActionReceiver]:
    chan = _Channel()
    return ActionSender(chan), ActionReceiver(chan)
