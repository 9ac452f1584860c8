import pytest

from cloudmusic.core import actions as act
from cloudmusic.core.errors import ApiError
from cloudmusic.core.guard import GenerationGuard
from cloudmusic.core.models import LoginInfo
from cloudmusic.db.database import get_cookies, get_login_info, save_login_info
from cloudmusic.ui.header import Header
from cloudmusic.ui.main_window import APP_TITLE, TAB_MINE, MainWindow

from conftest import DeferredTasks, FakeApi, ImmediateTasks, drain

ALICE = LoginInfo(uid=42, nickname="alice")


@pytest.fixture
def window(qtbot):
    w = MainWindow()
    qtbot.addWidget(w)
    return w


def make_header(window, chan, db, api, tasks=None):
    return Header(window, api, db, chan[0], GenerationGuard(), tasks or ImmediateTasks())


def test_switch_header_shows_back_button_off_the_main_page(window, chan, db):
    header = make_header(window, chan, db, FakeApi())

    header.switch_header("Chill")
    assert header.title.text() == "Chill"
    assert not header.btn_back.isHidden()

    header.switch_header(APP_TITLE)
    assert header.btn_back.isHidden()


def test_search_box_sends_search(window, chan, db):
    header = make_header(window, chan, db, FakeApi())

    header.search.setText("  ")
    header.search.returnPressed.emit()
    header.search.setText("jazz")
    header.search.returnPressed.emit()

    assert drain(chan[1]) == [act.Search("jazz")]


def test_back_button_switches_to_main(window, chan, db):
    header = make_header(window, chan, db, FakeApi())
    header.btn_back.click()
    assert drain(chan[1]) == [act.SwitchStackMain()]


def settle(header, receiver) -> list:
    """Drain the channel, applying session results to the header like the dispatcher does."""
    sent = drain(receiver)
    for action in sent:
        if isinstance(action, act.RefreshHeaderUserLogin):
            header.update_user_login(action.login_info)
        elif isinstance(action, act.RefreshHeaderUserLogout):
            header.update_user_logout()
    return sent


def test_login_success_stores_session(window, chan, db):
    header = make_header(window, chan, db, FakeApi(login=ALICE))

    header.login("alice@example.com", "pw")

    assert settle(header, chan[1]) == [
        act.RefreshHeaderUserLogin(ALICE),
        act.RefreshMine(),
        act.ShowNotice("Welcome back, alice!"),
    ]
    assert get_login_info(db) == ALICE
    assert get_cookies(db) == {"MUSIC_U": "token"}


def test_login_result_is_not_stored_before_it_is_applied(window, chan, db):
    header = make_header(window, chan, db, FakeApi(login=ALICE))

    header.login("alice", "pw")

    assert get_login_info(db) is None
    settle(header, chan[1])
    assert get_login_info(db) == ALICE


def test_login_failure_shows_notice(window, chan, db):
    header = make_header(window, chan, db, FakeApi(login=ApiError("wrong password", code=502)))

    header.login("alice", "bad")

    assert settle(header, chan[1]) == [act.ShowNotice("Login failed: wrong password (code 502)")]
    assert get_login_info(db) is None


def test_logout_clears_session_even_if_server_fails(window, chan, db):
    save_login_info(db, ALICE)
    api = FakeApi(logout=ApiError("offline"))
    header = make_header(window, chan, db, api)

    header.logout()

    assert settle(header, chan[1]) == [act.RefreshHeaderUserLogout(), act.MineHideAll(), act.ShowNotice("Logged out.")]
    assert get_login_info(db) is None
    assert ("clear_cookies", ()) in api.calls


def test_logout_supersedes_pending_login(window, chan, db):
    tasks = DeferredTasks()
    header = make_header(window, chan, db, FakeApi(login=ALICE, logout=None), tasks=tasks)

    header.login("alice", "pw")
    header.logout()
    tasks.run_all()

    assert settle(header, chan[1]) == [act.RefreshHeaderUserLogout(), act.MineHideAll(), act.ShowNotice("Logged out.")]
    assert get_login_info(db) is None


def test_login_finishing_after_newer_logout_is_dropped(window, chan, db):
    tasks = DeferredTasks()
    header = make_header(window, chan, db, FakeApi(login=ALICE, logout=None), tasks=tasks)

    header.login("alice", "pw")
    header.logout()
    tasks.run_newest_first()

    assert settle(header, chan[1]) == [act.RefreshHeaderUserLogout(), act.MineHideAll(), act.ShowNotice("Logged out.")]
    assert get_login_info(db) is None
    assert header.login_info is None


def test_logout_finishing_after_newer_login_is_dropped(window, chan, db):
    save_login_info(db, LoginInfo(uid=7, nickname="bob"))
    tasks = DeferredTasks()
    header = make_header(window, chan, db, FakeApi(login=ALICE, logout=None), tasks=tasks)

    header.logout()
    header.login("alice", "pw")
    tasks.run_newest_first()

    assert settle(header, chan[1]) == [
        act.RefreshHeaderUserLogin(ALICE),
        act.RefreshMine(),
        act.ShowNotice("Welcome back, alice!"),
    ]
    assert get_login_info(db) == ALICE
    assert get_cookies(db) == {"MUSIC_U": "token"}


def test_session_check_finishing_after_login_is_dropped(window, chan, db):
    save_login_info(db, LoginInfo(uid=7, nickname="bob"))
    tasks = DeferredTasks()
    header = make_header(window, chan, db, FakeApi(login=ALICE, login_status=None), tasks=tasks)

    header.update_user_button()
    header.login("alice", "pw")
    tasks.run_newest_first()

    assert settle(header, chan[1]) == [
        act.RefreshHeaderUserLogin(ALICE),
        act.RefreshMine(),
        act.ShowNotice("Welcome back, alice!"),
    ]
    assert get_login_info(db) == ALICE
    assert header.login_info == ALICE


def test_user_button_without_stored_session(window, chan, db):
    header = make_header(window, chan, db, FakeApi())
    header.update_user_button()
    assert drain(chan[1]) == [act.RefreshHeaderUserLogout()]


def test_user_button_with_live_session(window, chan, db):
    save_login_info(db, ALICE)
    fresh = LoginInfo(uid=42, nickname="alice2")
    header = make_header(window, chan, db, FakeApi(login_status=fresh))

    header.update_user_button()
    assert settle(header, chan[1]) == [act.RefreshHeaderUserLogin(fresh)]
    assert get_login_info(db) == fresh


def test_user_button_offline_trusts_stored_session(window, chan, db):
    save_login_info(db, ALICE)
    header = make_header(window, chan, db, FakeApi(login_status=ApiError("offline")))

    header.update_user_button()
    assert drain(chan[1]) == [act.RefreshHeaderUserLogin(ALICE)]


def test_user_button_expired_session(window, chan, db):
    save_login_info(db, ALICE)
    header = make_header(window, chan, db, FakeApi(login_status=None))

    header.update_user_button()
    assert get_login_info(db) == ALICE

    sent = settle(header, chan[1])
    assert sent[0] == act.RefreshHeaderUserLogout()
    assert isinstance(sent[1], act.ShowNotice)
    assert get_login_info(db) is None


def test_login_and_logout_buttons(window, chan, db):
    header = make_header(window, chan, db, FakeApi())

    header.update_user_login(ALICE)
    assert header.btn_user.text() == "alice"
    assert not header.btn_logout.isHidden()
    assert not header.btn_daily.isHidden()

    header.update_user_logout()
    assert header.btn_user.text() == "Log in"
    assert header.btn_logout.isHidden()
    assert header.login_info is None


def test_user_button_when_signed_in_opens_mine_tab(window, chan, db):
    header = make_header(window, chan, db, FakeApi())
    header.update_user_login(ALICE)
    header.tabs.setCurrentIndex(0)

    header.btn_user.click()
    assert header.tabs.currentIndex() == TAB_MINE
    assert drain(chan[1]) == [act.SwitchStackMain()]

    header.btn_user.click()
    assert drain(chan[1]) == [act.SwitchStackMain(), act.RefreshMine()]


@pytest.mark.parametrize(
    "result,text",
    [
        (5, "Checked in, +5 points."),
        (ApiError("done", code=-2), "Already checked in today."),
    ],
)
def test_daily_task(window, chan, db, result, text):
    header = make_header(window, chan, db, FakeApi(daily_task=result))
    header.daily_task()
    assert drain(chan[1]) == [act.ShowNotice(text)]
