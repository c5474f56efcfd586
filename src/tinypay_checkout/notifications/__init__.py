"""Notifications — event types and the ordered event bus.

Provides:
- ``EventBus`` — listener callbacks plus fan-out subscriber queues
- lifecycle and network event dataclasses
"""

from __future__ import annotations

from tinypay_checkout.notifications.events import (
    HashReceived,
    NetworkChanged,
    PaymentFailed,
    PaymentPending,
    PaymentSucceeded,
    RawEvent,
)
from tinypay_checkout.notifications.service import EventBus

__all__ = [
    "EventBus",
    "HashReceived",
    "NetworkChanged",
    "PaymentFailed",
    "PaymentPending",
    "PaymentSucceeded",
    "RawEvent",
]
