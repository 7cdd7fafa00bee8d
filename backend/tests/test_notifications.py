import threading
import pytest
from laundry.services.notifications import ChangeFeed, EVENT_INSERT, EVENT_UPDATE


def test_subscriber_receives_matching_events_only():
    feed = ChangeFeed()
    sub = feed.subscribe('orders', lambda ev: ev.row_id == 7)
    assert feed.publish(EVENT_UPDATE, 'orders', 7) == 1
    assert feed.publish(EVENT_UPDATE, 'orders', 8) == 0
    assert feed.publish(EVENT_UPDATE, 'laundry_hubs', 7) == 0
    events = sub.drain()
    assert [(e.kind, e.table, e.row_id) for e in events] == [('update', 'orders', 7)]
    sub.close()


def test_unfiltered_subscription_sees_whole_table():
    feed = ChangeFeed()
    with feed.subscribe('orders') as sub:
        feed.publish(EVENT_INSERT, 'orders', 1)
        feed.publish(EVENT_UPDATE, 'orders', 2)
        assert [e.row_id for e in sub.drain()] == [1, 2]


def test_closed_subscription_stops_receiving():
    feed = ChangeFeed()
    with feed.subscribe('orders') as sub:
        assert feed.subscriber_count == 1
    assert feed.subscriber_count == 0
    assert feed.publish(EVENT_UPDATE, 'orders', 1) == 0
    assert sub.get(timeout=0) is None
    sub.close()


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        ChangeFeed().publish('upsert', 'orders', 1)


def test_broken_predicate_does_not_block_others():
    feed = ChangeFeed()
    broken = feed.subscribe('orders', lambda ev: 1 / 0)
    healthy = feed.subscribe('orders')
    assert feed.publish(EVENT_UPDATE, 'orders', 3) == 1
    assert broken.get(timeout=0) is None
    assert healthy.get(timeout=0).row_id == 3


def test_get_waits_for_event_from_another_thread():
    feed = ChangeFeed()
    sub = feed.subscribe('orders')
    timer = threading.Timer(0.05, feed.publish, args=(EVENT_UPDATE, 'orders', 11))
    timer.start()
    try:
        event = sub.get(timeout=5)
    finally:
        timer.join()
    assert event is not None and event.row_id == 11
    assert sub.get(timeout=0.01) is None
