import queue
import threading

import pytest

from cloudmusic.core import actions as act
from cloudmusic.core.errors import ChannelClosed

from conftest import drain


def test_try_recv_on_empty_channel_raises_empty(chan):
    _sender, receiver = chan
    with pytest.raises(queue.Empty):
        receiver.try_recv()


def test_single_producer_order_is_preserved(chan):
    sender, receiver = chan
    sender.send(act.ShowNotice("a"))
    sender.send(act.RefreshHome())
    sender.send(act.ShowNotice("b"))

    assert drain(receiver) == [act.ShowNotice("a"), act.RefreshHome(), act.ShowNotice("b")]


def test_burst_without_consumer_never_blocks_or_drops(chan):
    sender, receiver = chan
    for i in range(10_000):
        sender.send(act.RefreshFoundViewInit(i))

    assert receiver.pending() == 10_000
    received = drain(receiver)
    assert [a.chart_id for a in received] == list(range(10_000))


def test_concurrent_producers_keep_their_own_order(chan):
    sender, receiver = chan
    per_producer = 500

    def produce(tag: int):
        for i in range(per_producer):
            sender.send(act.RefreshMineViewInit(tag * 10_000 + i))

    threads = [threading.Thread(target=produce, args=(t,)) for t in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    rows = [a.row for a in drain(receiver)]
    assert len(rows) == 4 * per_producer
    for tag in range(4):
        mine = [r for r in rows if r // 10_000 == tag]
        assert mine == sorted(mine)


def test_closed_channel_rejects_both_ends(chan):
    sender, receiver = chan
    sender.send(act.RefreshHome())
    receiver.close()

    assert receiver.is_closed()
    assert sender.is_closed()
    with pytest.raises(ChannelClosed):
        receiver.try_recv()
    with pytest.raises(ChannelClosed):
        sender.send(act.RefreshHome())


def test_close_twice_is_harmless(chan):
    _sender, receiver = chan
    receiver.close()
    receiver.close()
    assert receiver.is_closed()
