"""Ledger data models — Transaction, TransactionStatus, PendingSubmission.

Transactions are frozen; every change produces a new instance so a reader
holding a snapshot never observes a half-applied update.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from tinypay_checkout.errors.checkout_errors import ImmutableHashError, InvalidTransitionError
from tinypay_checkout.networks.units import to_smallest_unit


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TransactionStatus(enum.StrEnum):
    """Status of a ledger transaction.

    Lifecycle: PENDING → SUCCESS | FAILED (each terminal state is final).
    """

    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self is not TransactionStatus.PENDING


@dataclass(frozen=True)
class PendingSubmission:
    """A scan accepted for submission but not yet answered with a hash.

    Attributes:
        qr_content: The raw scanned payload.
        amount: Amount as entered by the merchant (decimal string).
        currency: Currency code.
        units: Amount converted to smallest units, as sent to the backend.
    """

    qr_content: str
    amount: str
    currency: str
    units: int = 0
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Transaction:
    """One payment attempt recorded in the ledger.

    Attributes:
        qr_raw_content: The original scanned string (audit trail).
        requested_amount: Amount as entered by the merchant (decimal string).
        requested_currency: Currency the merchant selected.
        requested_units: Smallest-unit integer string sent to the backend.
        status: Current status.
        remote_hash: Backend transaction hash, immutable once set.
        received_amount: Smallest-unit integer string confirmed by the backend.
        received_currency: Currency confirmed by the backend.
        id: Locally generated identifier.
        created_at: Creation time (UTC).
    """

    qr_raw_content: str
    requested_amount: str
    requested_currency: str
    requested_units: str = ""
    status: TransactionStatus = TransactionStatus.PENDING
    remote_hash: str | None = None
    received_amount: str | None = None
    received_currency: str | None = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_submission(cls, submission: PendingSubmission, remote_hash: str) -> Transaction:
        """Promote a staged submission into a pending transaction."""
        return cls(
            qr_raw_content=submission.qr_content,
            requested_amount=submission.amount,
            requested_currency=submission.currency,
            requested_units=str(submission.units),
            remote_hash=remote_hash,
            id=submission.id,
            created_at=submission.created_at,
        )

    def with_status(self, status: TransactionStatus) -> Transaction:
        """Return a copy moved to *status*.

        Raises:
            InvalidTransitionError: If the transaction is already terminal or
                *status* would move it back to pending.
        """
        if status == self.status and not status.is_terminal:
            return self
        if self.status.is_terminal or not status.is_terminal:
            raise InvalidTransitionError(self.status.value, status.value)
        return replace(self, status=status)

    def with_hash(self, remote_hash: str) -> Transaction:
        """Return a copy carrying *remote_hash*.

        Raises:
            ImmutableHashError: If a different hash is already set.
        """
        if self.remote_hash == remote_hash:
            return self
        if self.remote_hash:
            raise ImmutableHashError(self.remote_hash)
        return replace(self, remote_hash=remote_hash)

    def with_received(self, amount: str | None, currency: str | None) -> Transaction:
        """Return a copy with the received amount and currency set."""
        return replace(self, received_amount=amount, received_currency=currency)

    def confirmed(self, amount: str | None, currency: str | None) -> Transaction:
        """Return a successful copy, keeping received values only if given."""
        tx = self.with_status(TransactionStatus.SUCCESS)
        if amount is not None:
            tx = tx.with_received(amount, currency)
        return tx

    @property
    def revenue_units(self) -> tuple[str, str]:
        """Smallest-unit amount and currency counted toward revenue.

        The received values win when both are present; otherwise the requested
        amount is used.
        """
        if self.received_amount is not None and self.received_currency is not None:
            return self.received_amount, self.received_currency
        units = self.requested_units or str(
            to_smallest_unit(self.requested_amount, self.requested_currency)
        )
        return units, self.requested_currency

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "id": self.id,
            "qr_raw_content": self.qr_raw_content,
            "created_at": self.created_at.isoformat(),
            "requested_amount": self.requested_amount,
            "requested_currency": self.requested_currency,
            "requested_units": self.requested_units,
            "status": self.status.value,
            "remote_hash": self.remote_hash,
            "received_amount": self.received_amount,
            "received_currency": self.received_currency,
        }
