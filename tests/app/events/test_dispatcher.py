"""Tests for the fire-and-forget event dispatcher."""

import threading
from unittest.mock import MagicMock

from app.events.dispatcher import EventDispatcher


def test_dispatch_preserves_order(event_emitter):
    dispatcher = EventDispatcher(event_emitter)
    for i in range(20):
        assert dispatcher.dispatch("chat.message.new", {"n": i}) is True
    dispatcher.wait_idle(timeout=5)

    assert [p["n"] for p in event_emitter.of_type("chat.message.new")] == list(range(20))
    dispatcher.shutdown()
    assert event_emitter.closed is True


def test_dispatch_does_not_block_on_slow_emitter():
    release = threading.Event()
    emitter = MagicMock()
    emitter.emit_with_metadata.side_effect = lambda *args: release.wait(5)
    dispatcher = EventDispatcher(emitter, max_pending=2)

    assert dispatcher.dispatch("a", {}) is True
    assert dispatcher.dispatch("b", {}) is True
    # Queue is full: dropped instead of blocking the caller
    assert dispatcher.dispatch("c", {}) is False

    release.set()
    dispatcher.shutdown()
    assert emitter.emit_with_metadata.call_count == 2


def test_emit_failures_are_logged(caplog):
    emitter = MagicMock()
    emitter.emit_with_metadata.side_effect = RuntimeError("bus down")
    dispatcher = EventDispatcher(emitter)

    dispatcher.dispatch("chat.message.read", {"message_id": 1})
    dispatcher.wait_idle(timeout=5)
    dispatcher.shutdown()

    assert "Failed to emit chat.message.read event" in caplog.text


def test_dispatch_after_shutdown_is_dropped(event_emitter):
    dispatcher = EventDispatcher(event_emitter)
    dispatcher.shutdown()
    assert dispatcher.dispatch("chat.message.new", {}) is False
    assert event_emitter.events == []
