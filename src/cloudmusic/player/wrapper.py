# player/wrapper.py
from __future__ import annotations

from cloudmusic.api.client import MusicApi
from cloudmusic.api.lrclib import LrcLibClient
from cloudmusic.core import actions as act
from cloudmusic.core.channel import ActionSender
from cloudmusic.core.errors import ApiError
from cloudmusic.core.guard import PLAYER_LANE, GenerationGuard
from cloudmusic.core.logger import get_logger
from cloudmusic.core.models import PlayerTypes, SongInfo
from cloudmusic.core.tasks import BackgroundTasks
from cloudmusic.player.player import Player
from cloudmusic.ui.player_bar import PlayerBar

_logger = get_logger("player")


class PlayerWrapper:
    """
    Player surface: owns the play queue and turns PlayerInit/Player actions
    into playback.

    Starting a song advances the player lane, so a slow stream lookup or lyrics
    fetch for the previous song can never land on the new one.
    """

    def __init__(
        self,
        bar: PlayerBar,
        player: Player,
        api: MusicApi,
        lyrics: LrcLibClient,
        sender: ActionSender,
        guard: GenerationGuard,
        tasks: BackgroundTasks,
    ):
        self.bar = bar
        self.media = player
        self.api = api
        self.lyrics = lyrics
        self.sender = sender
        self.guard = guard
        self.tasks = tasks

        self.queue: list[SongInfo] = []
        self.index: int = -1
        self.player_type = PlayerTypes.SONG
        self.current: SongInfo | None = None

        self.media.ended.connect(self.forward)
        self.media.failed.connect(lambda msg: self.sender.send(act.ShowNotice(f"Playback failed: {msg}")))
        self.bar.bind(self.media)
        self.bar.set_prev_next_handlers(self.backward, self.forward)

    # ---- queue ---------------------------------------------------

    def set_playlist(self, songs: list[SongInfo], player_type: PlayerTypes = PlayerTypes.SONG, start: int = 0) -> None:
        self.queue = list(songs)
        self.player_type = player_type
        self.index = start if 0 <= start < len(self.queue) else -1

    def forward(self) -> None:
        if not self.queue:
            return
        nxt = self.index + 1
        if nxt >= len(self.queue):
            if self.player_type is PlayerTypes.FM:
                # FM batch used up: fetch the next one.
                self.sender.send(act.RefreshMineFmPlayerList())
            return
        self.index = nxt
        self.sender.send(act.PlayerInit(self.queue[nxt], self.player_type))

    def backward(self) -> None:
        prv = self.index - 1
        if prv < 0 or prv >= len(self.queue):
            return
        self.index = prv
        self.sender.send(act.PlayerInit(self.queue[prv], self.player_type))

    # ---- surface API ---------------------------------------------

    def initialize_player(self, song: SongInfo, player_type: PlayerTypes) -> None:
        self.player_type = player_type
        ids = [s.id for s in self.queue]
        if song.id in ids:
            self.index = ids.index(song.id)
        else:
            self.queue.insert(self.index + 1, song)
            self.index += 1

        self.bar.show_loading(song)
        generation = self.guard.advance(PLAYER_LANE)

        if song.song_url:
            self.guard.send_if_current(self.sender, generation, act.Player(song, song.song_url), PLAYER_LANE)
            return
        self.tasks.spawn(self._resolve_url, song, generation)

    def player(self, song: SongInfo, url: str) -> None:
        self.current = song
        self.bar.set_lyrics("")
        self.media.play_url(url, song)

        generation = self.guard.current_generation(PLAYER_LANE)
        self.tasks.spawn(self._fetch_lyrics, song, generation)

    def update_lyrics(self, song_id: int, lyrics: str) -> None:
        if self.current is None or self.current.id != song_id:
            return
        self.bar.set_lyrics(lyrics)

    # ---- background ----------------------------------------------

    def _resolve_url(self, song: SongInfo, generation: int) -> None:
        try:
            url = self.api.song_url(song.id)
        except ApiError as e:
            self.guard.send_if_current(
                self.sender, generation, act.ShowNotice(f"Cannot play “{song.name}”: {e}"), PLAYER_LANE
            )
            return
        self.guard.send_if_current(self.sender, generation, act.Player(song, url), PLAYER_LANE)

    def _fetch_lyrics(self, song: SongInfo, generation: int) -> None:
        try:
            result = self.lyrics.fetch_best(
                title=song.name,
                artist=song.singer,
                album=song.album or None,
                duration_s=song.duration_ms / 1000 if song.duration_ms else None,
            )
        except ApiError as e:
            # Lyrics are optional; no notice.
            _logger.debug("lyrics lookup failed for %s: %s", song.id, e)
            return

        text = result.text()
        if text:
            self.guard.send_if_current(self.sender, generation, act.RefreshLyrics(song.id, text), PLAYER_LANE)
