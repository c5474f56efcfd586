"""Tests for the event bus and event types."""

from __future__ import annotations

import logging

import pytest

from tinypay_checkout.ledger.models import PendingSubmission
from tinypay_checkout.notifications.events import (
    HashReceived,
    NetworkChanged,
    PaymentFailed,
    PaymentPending,
    PaymentSucceeded,
    RawEvent,
)
from tinypay_checkout.notifications.service import EventBus


class TestEvents:
    """Tests for event dataclasses."""

    def test_type_strings(self) -> None:
        assert NetworkChanged().type == "network_changed"
        assert HashReceived().type == "hash_received"
        assert PaymentSucceeded().type == "success"
        assert PaymentFailed().type == "failed"
        assert PaymentPending().type == "pending"

    def test_to_dict(self) -> None:
        event = PaymentFailed(message="Over limit", details=None, hash="h1")
        assert event.to_dict() == {
            "type": "failed",
            "content": {},
            "message": "Over limit",
            "details": None,
            "hash": "h1",
        }

    def test_hash_received_omits_submission(self) -> None:
        sub = PendingSubmission(qr_content="raw", amount="1", currency="SOL")
        event = HashReceived(hash="h1", submission=sub)
        assert event.to_dict() == {"type": "hash_received", "hash": "h1"}

    def test_frozen(self) -> None:
        event = RawEvent(type="x")
        with pytest.raises(AttributeError):
            event.type = "y"  # type: ignore[misc]


class TestEventBusListeners:
    """Tests for synchronous listeners."""

    async def test_listeners_run_in_order(self) -> None:
        bus = EventBus()
        calls: list[str] = []
        bus.add_listener(lambda e: calls.append("first"))
        bus.add_listener(lambda e: calls.append("second"))
        await bus.notify(PaymentPending(hash="h1"))
        assert calls == ["first", "second"]

    async def test_duplicate_listener_registered_once(self) -> None:
        bus = EventBus()
        calls: list[RawEvent] = []
        bus.add_listener(calls.append)
        bus.add_listener(calls.append)
        await bus.notify(PaymentPending(hash="h1"))
        assert len(calls) == 1

    async def test_remove_listener(self) -> None:
        bus = EventBus()
        calls: list[RawEvent] = []
        bus.add_listener(calls.append)
        bus.remove_listener(calls.append)
        bus.remove_listener(calls.append)  # absent: no-op
        await bus.notify(PaymentPending(hash="h1"))
        assert calls == []

    async def test_failing_listener_does_not_block_others(self, caplog) -> None:
        bus = EventBus()
        calls: list[RawEvent] = []

        def broken(event: RawEvent) -> None:
            raise RuntimeError("boom")

        bus.add_listener(broken)
        bus.add_listener(calls.append)
        q = bus.add_subscriber("ui")
        with caplog.at_level(logging.ERROR):
            await bus.notify(PaymentPending(hash="h1"))
        assert len(calls) == 1
        assert q.qsize() == 1
        assert "failed on pending event" in caplog.text

    async def test_listeners_before_subscribers(self) -> None:
        bus = EventBus()
        q = bus.add_subscriber("ui")
        seen_queue_sizes: list[int] = []
        bus.add_listener(lambda e: seen_queue_sizes.append(q.qsize()))
        await bus.notify(PaymentPending(hash="h1"))
        assert seen_queue_sizes == [0]
        assert q.qsize() == 1


class TestEventBusSubscribers:
    """Tests for queue subscribers."""

    async def test_fan_out(self) -> None:
        bus = EventBus()
        a = bus.add_subscriber("a")
        b = bus.add_subscriber("b")
        assert bus.subscriber_count == 2
        event = NetworkChanged(network_id="solana-devnet")
        await bus.notify(event)
        assert a.get_nowait() is event
        assert b.get_nowait() is event

    async def test_delivery_order(self) -> None:
        bus = EventBus()
        q = bus.add_subscriber("ui")
        await bus.notify(HashReceived(hash="h1"))
        await bus.notify(PaymentSucceeded(hash="h1"))
        assert q.get_nowait().type == "hash_received"
        assert q.get_nowait().type == "success"

    async def test_remove_subscriber(self) -> None:
        bus = EventBus()
        q = bus.add_subscriber("ui")
        bus.remove_subscriber("ui")
        bus.remove_subscriber("ui")
        assert bus.subscriber_count == 0
        await bus.notify(PaymentPending(hash="h1"))
        assert q.empty()

    async def test_full_queue_drops_event(self, caplog) -> None:
        bus = EventBus()
        q = bus.add_subscriber("ui", buffer=1)
        with caplog.at_level(logging.WARNING):
            await bus.notify(PaymentPending(hash="h1"))
            await bus.notify(PaymentPending(hash="h2"))
        assert q.qsize() == 1
        assert q.get_nowait().hash == "h1"
        assert "queue full" in caplog.text
