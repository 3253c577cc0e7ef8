import logging

from sustainability_engine.events import EventNotifier


def test_emit_delivers_in_order_with_timestamp():
    notifier = EventNotifier()
    calls = []
    notifier.on("evt", lambda payload: calls.append(("a", payload)))
    notifier.on("evt", lambda payload: calls.append(("b", payload)))

    delivered = notifier.emit("evt", {"practice_id": "water-1"})

    assert delivered == 2
    assert [name for name, _ in calls] == ["a", "b"]
    assert calls[0][1]["practice_id"] == "water-1"
    assert "timestamp" in calls[0][1]


def test_emit_keeps_existing_timestamp():
    notifier = EventNotifier()
    seen = []
    notifier.on("evt", seen.append)
    notifier.emit("evt", {"timestamp": "2024-01-01T00:00:00+00:00"})
    assert seen[0]["timestamp"] == "2024-01-01T00:00:00+00:00"


def test_emit_without_listeners():
    assert EventNotifier().emit("nobody-listens") == 0


def test_failing_handler_does_not_block_others(caplog):
    notifier = EventNotifier()
    seen = []

    def broken(_payload):
        raise RuntimeError("boom")

    notifier.on("evt", broken)
    notifier.on("evt", seen.append)

    with caplog.at_level(logging.ERROR):
        delivered = notifier.emit("evt", {"x": 1})

    assert delivered == 1
    assert seen and seen[0]["x"] == 1
    assert "raised" in caplog.text


def test_unsubscribe():
    notifier = EventNotifier()
    seen = []
    unsubscribe = notifier.on("evt", seen.append)
    assert notifier.listener_count("evt") == 1

    unsubscribe()
    notifier.emit("evt")
    assert seen == []
    assert notifier.listener_count("evt") == 0
    assert notifier.off("evt", seen.append) is False


def test_handler_can_unsubscribe_during_emit():
    notifier = EventNotifier()
    seen = []

    def once(payload):
        seen.append("once")
        notifier.off("evt", once)

    notifier.on("evt", once)
    notifier.on("evt", lambda payload: seen.append("always"))

    notifier.emit("evt")
    notifier.emit("evt")
    assert seen == ["once", "always", "always"]


def test_payload_is_copied():
    notifier = EventNotifier()
    original = {"amount": 1}
    notifier.on("evt", lambda payload: payload.update(amount=2))
    notifier.emit("evt", original)
    assert original == {"amount": 1}
