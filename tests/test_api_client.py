import pytest
import requests

from cloudmusic.api.client import TOP_CHARTS, MusicApi
from cloudmusic.api.lrclib import LrcLibClient
from cloudmusic.core.errors import ApiError


class FakeResponse:
    def __init__(self, data=None, status_code=200, text=None):
        self._data = data
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._text = text

    def json(self):
        if self._text is not None:
            raise ValueError("not json")
        return self._data


class FakeGet:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def api():
    return MusicApi("http://music.lan:3000/")


def test_top_song_lists_are_parsed(api, monkeypatch):
    get = FakeGet(FakeResponse({"code": 200, "playlists": [
        {"id": 1, "name": "Morning", "coverImgUrl": "http://c/1.jpg"},
        {"id": 2, "name": "Night", "coverImgUrl": ""},
    ]}))
    monkeypatch.setattr(api.session, "get", get)

    lists = api.top_song_lists(limit=2)

    assert [(s.id, s.name, s.cover_img_url) for s in lists] == [(1, "Morning", "http://c/1.jpg"), (2, "Night", "")]
    url, params = get.calls[0]
    assert url == "http://music.lan:3000/top/playlist"
    assert params["limit"] == 2


def test_song_fields_from_playlist_and_search_shapes(api, monkeypatch):
    monkeypatch.setattr(api.session, "get", FakeGet(
        FakeResponse({"code": 200, "songs": [
            {"id": 5, "name": "A", "ar": [{"name": "X"}, {"name": "Y"}], "al": {"name": "Al", "picUrl": "p"}, "dt": 1000},
        ]}),
        FakeResponse({"code": 200, "result": {"songs": [
            {"id": 6, "name": "B", "artists": [{"name": "Z"}], "album": {"name": "Bl"}, "duration": 2000},
        ]}}),
    ))

    [a] = api.song_list_detail(99)
    [b] = api.search("b")
    assert (a.singer, a.album, a.pic_url, a.duration_ms) == ("X / Y", "Al", "p", 1000)
    assert (b.singer, b.album, b.duration_ms) == ("Z", "Bl", 2000)


def test_service_error_code_raises(api, monkeypatch):
    monkeypatch.setattr(api.session, "get", FakeGet(FakeResponse({"code": 502, "msg": "wrong password"})))
    with pytest.raises(ApiError) as info:
        api.login("13800000000", "pw")
    assert info.value.code == 502
    assert "wrong password" in str(info.value)


def test_transport_error_becomes_api_error(api, monkeypatch):
    monkeypatch.setattr(api.session, "get", FakeGet(requests.ConnectionError("refused")))
    with pytest.raises(ApiError):
        api.personal_fm()


def test_non_json_response_raises(api, monkeypatch):
    monkeypatch.setattr(api.session, "get", FakeGet(FakeResponse(status_code=502, text="<html>")))
    with pytest.raises(ApiError) as info:
        api.recommend_songs()
    assert info.value.code == 502


def test_login_picks_endpoint_by_username(api, monkeypatch):
    profile = {"code": 200, "profile": {"userId": 7, "nickname": "alice"}}
    get = FakeGet(FakeResponse(profile), FakeResponse(profile))
    monkeypatch.setattr(api.session, "get", get)

    assert api.login("alice@example.com", "pw").uid == 7
    assert api.login("13800000000", "pw").nickname == "alice"
    assert get.calls[0][0].endswith("/login")
    assert get.calls[1][0].endswith("/login/cellphone")


def test_login_status_without_profile_is_none(api, monkeypatch):
    monkeypatch.setattr(api.session, "get", FakeGet(FakeResponse({"code": 200, "data": {"profile": None}})))
    assert api.login_status() is None


def test_song_url_missing_raises(api, monkeypatch):
    monkeypatch.setattr(api.session, "get", FakeGet(FakeResponse({"code": 200, "data": [{"id": 1, "url": None}]})))
    with pytest.raises(ApiError):
        api.song_url(1)


def test_chart_detail_maps_index_to_playlist(api, monkeypatch):
    get = FakeGet(FakeResponse({"code": 200, "songs": []}))
    monkeypatch.setattr(api.session, "get", get)

    assert api.chart_detail(1) == []
    assert get.calls[0][1]["id"] == TOP_CHARTS[1][0]
    with pytest.raises(ApiError):
        api.chart_detail(len(TOP_CHARTS))


def test_cookies_round_trip(api):
    api.import_cookies({"MUSIC_U": "abc"})
    assert api.export_cookies() == {"MUSIC_U": "abc"}


def test_logout_request_leaves_cookies_to_the_caller(api, monkeypatch):
    monkeypatch.setattr(api.session, "get", FakeGet(FakeResponse({"code": 200})))
    api.import_cookies({"MUSIC_U": "abc"})

    api.logout()
    assert api.export_cookies() == {"MUSIC_U": "abc"}

    api.clear_cookies()
    assert api.export_cookies() == {}


# ---- lrclib ------------------------------------------------------


def test_lrclib_strips_api_suffix():
    assert LrcLibClient("https://lrclib.net/api/").base_url == "https://lrclib.net"


def test_lrclib_falls_back_to_search(monkeypatch):
    client = LrcLibClient()
    monkeypatch.setattr(client.session, "get", FakeGet(
        FakeResponse(status_code=404),
        FakeResponse([{"plainLyrics": "la la", "syncedLyrics": "[00:01.00]la la"}]),
    ))

    result = client.fetch_best("Song", "Band", None, 180.0)
    assert result.source == "search"
    assert result.text() == "[00:01.00]la la"


def test_lrclib_instrumental(monkeypatch):
    client = LrcLibClient()
    monkeypatch.setattr(client.session, "get", FakeGet(FakeResponse({"instrumental": True})))
    assert client.fetch_best("Song", "Band", "Album", None).text() == "[instrumental]"


def test_lrclib_nothing_found(monkeypatch):
    client = LrcLibClient()
    monkeypatch.setattr(client.session, "get", FakeGet(FakeResponse(status_code=404), FakeResponse([])))
    result = client.fetch_best("Song", "Band", None, None)
    assert result.source == "none"
    assert result.text() == ""
