"""Event types emitted by the checkout engine.

- ``RawEvent`` — envelope with a type string + content
- ``NetworkChanged`` — the selected network was switched
- ``HashReceived`` / ``PaymentSucceeded`` / ``PaymentFailed`` /
  ``PaymentPending`` — payment lifecycle milestones
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tinypay_checkout.ledger.models import PendingSubmission

NETWORK_CHANGED = "network_changed"
HASH_RECEIVED = "hash_received"
SUCCESS = "success"
FAILED = "failed"
PENDING = "pending"


@dataclass(frozen=True)
class RawEvent:
    """Generic event envelope sent to subscribers."""

    type: str
    content: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)


@dataclass(frozen=True)
class NetworkChanged(RawEvent):
    """Emitted after the selected network is persisted."""

    type: str = NETWORK_CHANGED
    network_id: str = ""


@dataclass(frozen=True)
class HashReceived(RawEvent):
    """The backend accepted a payment and returned its transaction hash."""

    type: str = HASH_RECEIVED
    hash: str = ""
    submission: PendingSubmission | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict (the staged submission is omitted)."""
        return {"type": self.type, "hash": self.hash}


@dataclass(frozen=True)
class PaymentSucceeded(RawEvent):
    """A transaction was confirmed by the backend."""

    type: str = SUCCESS
    hash: str = ""
    received_amount: str | None = None
    received_currency: str | None = None


@dataclass(frozen=True)
class PaymentFailed(RawEvent):
    """A submission was rejected, or a tracked transaction was not found."""

    type: str = FAILED
    message: str = ""
    details: str | None = None
    hash: str | None = None


@dataclass(frozen=True)
class PaymentPending(RawEvent):
    """Polling ended without a confirmed or failed result."""

    type: str = PENDING
    hash: str = ""
