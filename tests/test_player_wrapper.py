from dataclasses import replace

import pytest
from PySide6.QtCore import QObject, Signal

from cloudmusic.api.lrclib import LyricsResult
from cloudmusic.core import actions as act
from cloudmusic.core.errors import ApiError
from cloudmusic.core.guard import GenerationGuard
from cloudmusic.core.models import PlayerTypes
from cloudmusic.player.wrapper import PlayerWrapper
from cloudmusic.ui.player_bar import PlayerBar

from conftest import DeferredTasks, FakeApi, ImmediateTasks, drain


class FakeMedia(QObject):
    statusChanged = Signal(object)
    positionChanged = Signal(int)
    durationChanged = Signal(int)
    trackChanged = Signal(object)
    ended = Signal()
    failed = Signal(str)

    def __init__(self):
        super().__init__()
        self.played = []
        self.volumes = []

    def play_url(self, url, meta=None):
        self.played.append((url, meta))
        self.trackChanged.emit(meta)

    def toggle_play_pause(self):
        pass

    def seek_ms(self, ms):
        pass

    def position_ms(self):
        return 0

    def volume(self):
        return 0.7

    def set_volume(self, volume_0_to_1):
        self.volumes.append(volume_0_to_1)


class FakeLyrics:
    def __init__(self, result):
        self.result = result

    def fetch_best(self, title, artist, album, duration_s):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def media():
    return FakeMedia()


@pytest.fixture
def bar(qtbot):
    b = PlayerBar()
    qtbot.addWidget(b)
    return b


def make_wrapper(bar, media, chan, api=None, lyrics=None, tasks=None):
    lyrics = lyrics or FakeLyrics(LyricsResult(plain=None, synced=None, instrumental=False, source="none"))
    return PlayerWrapper(bar, media, api or FakeApi(), lyrics, chan[0], GenerationGuard(), tasks or ImmediateTasks())


def test_song_with_known_url_plays_straight_away(bar, media, chan, songs):
    wrapper = make_wrapper(bar, media, chan)
    song = replace(songs[0], song_url="http://cdn/1.mp3")

    wrapper.initialize_player(song, PlayerTypes.SONG)

    assert "loading" in bar.lbl_title.text()
    assert drain(chan[1]) == [act.Player(song, "http://cdn/1.mp3")]


def test_stream_url_is_resolved_in_background(bar, media, chan, songs):
    api = FakeApi(song_url="http://cdn/101.mp3")
    wrapper = make_wrapper(bar, media, chan, api=api)

    wrapper.initialize_player(songs[0], PlayerTypes.SONG)

    assert api.calls == [("song_url", (101,))]
    assert drain(chan[1]) == [act.Player(songs[0], "http://cdn/101.mp3")]


def test_unplayable_song_shows_notice(bar, media, chan, songs):
    wrapper = make_wrapper(bar, media, chan, api=FakeApi(song_url=ApiError("no stream")))

    wrapper.initialize_player(songs[0], PlayerTypes.SONG)

    [action] = drain(chan[1])
    assert isinstance(action, act.ShowNotice)
    assert "Intro" in action.text


def test_only_the_latest_song_start_wins(bar, media, chan, songs):
    tasks = DeferredTasks()
    wrapper = make_wrapper(bar, media, chan, api=FakeApi(song_url="http://cdn/x.mp3"), tasks=tasks)

    wrapper.initialize_player(songs[0], PlayerTypes.SONG)
    wrapper.initialize_player(songs[1], PlayerTypes.SONG)
    tasks.run_all()

    assert drain(chan[1]) == [act.Player(songs[1], "http://cdn/x.mp3")]


def test_player_starts_media_and_fetches_lyrics(bar, media, chan, songs):
    lyrics = FakeLyrics(LyricsResult(plain="la la", synced=None, instrumental=False, source="get"))
    wrapper = make_wrapper(bar, media, chan, lyrics=lyrics)

    wrapper.player(songs[0], "http://cdn/101.mp3")

    assert media.played == [("http://cdn/101.mp3", songs[0])]
    assert bar.lbl_title.text() == songs[0].display_title()
    assert drain(chan[1]) == [act.RefreshLyrics(101, "la la")]


def test_lyrics_failure_is_silent(bar, media, chan, songs):
    wrapper = make_wrapper(bar, media, chan, lyrics=FakeLyrics(ApiError("down")))
    wrapper.player(songs[0], "http://cdn/101.mp3")
    assert drain(chan[1]) == []


def test_lyrics_for_another_song_are_ignored(bar, media, chan, songs):
    wrapper = make_wrapper(bar, media, chan)
    wrapper.player(songs[0], "http://cdn/101.mp3")

    wrapper.update_lyrics(999, "wrong song")
    assert bar.lbl_lyric.toolTip() == ""

    wrapper.update_lyrics(101, "right song")
    assert bar.lbl_lyric.toolTip() == "right song"


def test_forward_and_backward_walk_the_queue(bar, media, chan, songs):
    wrapper = make_wrapper(bar, media, chan)
    wrapper.set_playlist(songs, PlayerTypes.SONG, 0)

    wrapper.forward()
    wrapper.forward()
    wrapper.forward()
    assert drain(chan[1]) == [act.PlayerInit(songs[1], PlayerTypes.SONG), act.PlayerInit(songs[2], PlayerTypes.SONG)]

    wrapper.backward()
    assert drain(chan[1]) == [act.PlayerInit(songs[1], PlayerTypes.SONG)]


def test_end_of_fm_batch_asks_for_more(bar, media, chan, songs):
    wrapper = make_wrapper(bar, media, chan)
    wrapper.set_playlist(songs[:1], PlayerTypes.FM, 0)

    media.ended.emit()

    assert drain(chan[1]) == [act.RefreshMineFmPlayerList()]


def test_playback_failure_becomes_notice(bar, media, chan):
    make_wrapper(bar, media, chan)
    media.failed.emit("decoder missing")
    assert drain(chan[1]) == [act.ShowNotice("Playback failed: decoder missing")]


def test_starting_a_song_outside_the_queue_inserts_it(bar, media, chan, songs):
    wrapper = make_wrapper(bar, media, chan, api=FakeApi(song_url="u"))
    wrapper.set_playlist(songs[:2], PlayerTypes.SONG, 0)

    wrapper.initialize_player(songs[2], PlayerTypes.SONG)

    assert [s.id for s in wrapper.queue] == [101, 103, 102]
    assert wrapper.index == 1


def test_volume_slider_drives_the_player(bar, media, chan):
    make_wrapper(bar, media, chan)
    assert bar.volume.value() == 70

    bar.volume.setValue(30)

    assert media.volumes == [0.3]
