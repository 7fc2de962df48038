from shared.events import Broadcaster


def test_publish_reaches_every_subscriber():
    broadcaster = Broadcaster()
    seen = []
    broadcaster.subscribe("a", lambda event: seen.append(("a", event)))
    broadcaster.subscribe("b", lambda event: seen.append(("b", event)))

    assert broadcaster.publish() == 2
    assert sorted(seen) == [("a", "submissions_updated"), ("b", "submissions_updated")]


def test_failing_subscriber_does_not_block_others():
    broadcaster = Broadcaster()
    seen = []

    def broken(event):
        raise RuntimeError("socket gone")

    broadcaster.subscribe("broken", broken)
    broadcaster.subscribe("ok", seen.append)
    assert broadcaster.publish() == 1
    assert seen == ["submissions_updated"]


def test_unsubscribed_clients_get_nothing():
    broadcaster = Broadcaster()
    seen = []
    handle = broadcaster.subscribe("a", seen.append)
    broadcaster.unsubscribe(handle)
    broadcaster.unsubscribe(handle)

    assert broadcaster.subscriber_count == 0
    assert broadcaster.publish() == 0
    assert seen == []
