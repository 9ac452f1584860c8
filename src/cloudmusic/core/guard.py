# core/guard.py
from __future__ import annotations

import threading

from cloudmusic.core.actions import Action
from cloudmusic.core.channel import ActionSender
from cloudmusic.core.logger import get_logger

_logger = get_logger("guard")

DEFAULT_LANE = "default"
PLAYER_LANE = "player"
SESSION_LANE = "session"


class GenerationGuard:
    """
    Shared generation counter for single-flight background work.

    A task captures a generation before it starts; when it finishes it may only
    publish its result if that generation is still current. `advance()` makes
    every previously issued generation stale. In-flight work is not
    interrupted, only its result is discarded.

    Each lane is an independent counter, so superseding a page load does not
    invalidate a stream lookup.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generations: dict[str, int] = {}

    def current_generation(self, lane: str = DEFAULT_LANE) -> int:
        with self._lock:
            return self._generations.get(lane, 0)

    def advance(self, lane: str = DEFAULT_LANE) -> int:
        with self._lock:
            gen = self._generations.get(lane, 0) + 1
            self._generations[lane] = gen
            return gen

    def is_current(self, generation: int, lane: str = DEFAULT_LANE) -> bool:
        with self._lock:
            return self._generations.get(lane, 0) == generation

    def send_if_current(
        self,
        sender: ActionSender,
        generation: int,
        action: Action,
        lane: str = DEFAULT_LANE,
    ) -> bool:
        """
        Sends `action` only if `generation` is still current for `lane`.

        The compare and the (non-blocking) send happen under the lock, so an
        `advance()` cannot slip in between them.
        """
        with self._lock:
            current = self._generations.get(lane, 0)
            if current != generation:
                _logger.debug(
                    "stale %s dropped: lane=%s gen=%d current=%d",
                    type(action).__name__, lane, generation, current,
                )
                return False
            sender.send(action)
            return True
