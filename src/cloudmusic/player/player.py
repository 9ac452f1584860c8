# player/player.py
from __future__ import annotations

from enum import Enum, auto

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from cloudmusic.core.logger import get_logger
from cloudmusic.core.models import SongInfo

_logger = get_logger("player")


class PlayerStatus(Enum):
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()


class Player(QObject):
    """QMediaPlayer wrapper for remote streams."""

    statusChanged = Signal(object)      # PlayerStatus
    positionChanged = Signal(int)       # ms
    durationChanged = Signal(int)       # ms
    trackChanged = Signal(object)       # SongInfo | None
    ended = Signal()
    failed = Signal(str)

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)

        self.status = PlayerStatus.STOPPED
        self.track: SongInfo | None = None

        self.audio = QAudioOutput(self)
        self.media = QMediaPlayer(self)
        self.media.setAudioOutput(self.audio)

        self._volume_0_to_1: float = 0.7
        self.audio.setVolume(self._volume_0_to_1)

        self.media.positionChanged.connect(self.positionChanged.emit)
        self.media.durationChanged.connect(self.durationChanged.emit)
        self.media.playbackStateChanged.connect(self._on_state_changed)
        self.media.mediaStatusChanged.connect(self._on_media_status)
        self.media.errorOccurred.connect(self._on_error)

    # ----------------------------
    # QMediaPlayer handlers
    # ----------------------------

    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self._set_status(PlayerStatus.PLAYING)
        elif state == QMediaPlayer.PlaybackState.PausedState:
            self._set_status(PlayerStatus.PAUSED)
        else:
            self._set_status(PlayerStatus.STOPPED)

    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._set_status(PlayerStatus.STOPPED)
            self.ended.emit()

    def _on_error(self, _error, message: str) -> None:
        _logger.warning("playback error: %s", message)
        self.failed.emit(message or "Playback failed")

    def _set_status(self, new_status: PlayerStatus) -> None:
        if self.status != new_status:
            self.status = new_status
            self.statusChanged.emit(self.status)

    # ----------------------------
    # Public API
    # ----------------------------

    def play_url(self, url: str, meta: SongInfo | None = None) -> None:
        self.track = meta
        self.trackChanged.emit(self.track)

        self.media.setSource(QUrl(url))
        self.media.play()

    def play(self) -> None:
        self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def stop(self) -> None:
        self.media.stop()

    def toggle_play_pause(self) -> None:
        if self.media.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self.pause()
        else:
            self.play()

    def seek_ms(self, ms: int) -> None:
        self.media.setPosition(max(0, int(ms)))

    def volume(self) -> float:
        return self._volume_0_to_1

    def set_volume(self, volume_0_to_1: float) -> None:
        v = min(1.0, max(0.0, float(volume_0_to_1)))
        self._volume_0_to_1 = v
        self.audio.setVolume(v)

    def position_ms(self) -> int:
        return int(self.media.position())
