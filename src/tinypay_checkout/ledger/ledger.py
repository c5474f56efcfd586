"""Ledger — append-only transaction collection with revenue aggregation.

The ledger is the only writer of its transaction list. Every mutating call
swaps in a new frozen :class:`Transaction` and recomputes the revenue
breakdown before returning, so observers never see stale totals.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tinypay_checkout.errors.checkout_errors import CheckoutError
from tinypay_checkout.ledger.models import Transaction, TransactionStatus
from tinypay_checkout.networks.profiles import SOLANA_DEVNET
from tinypay_checkout.networks.units import format_amount, from_smallest_unit
from tinypay_checkout.notifications.events import (
    HashReceived,
    NetworkChanged,
    PaymentFailed,
    PaymentSucceeded,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from tinypay_checkout.networks.profiles import NetworkProfile
    from tinypay_checkout.notifications.events import RawEvent
    from tinypay_checkout.notifications.service import EventBus

logger = logging.getLogger(__name__)


class Ledger:
    """In-memory, newest-first collection of transactions.

    Usage::

        ledger = Ledger(default_currency="SOL")
        ledger.attach(bus)
        ledger.insert(tx)
        ledger.revenue_breakdown()  # {"SOL": 1.0}
    """

    def __init__(
        self,
        *,
        default_currency: str = SOLANA_DEVNET.default_currency,
        profile_lookup: Callable[[str], NetworkProfile] | None = None,
    ) -> None:
        self._transactions: list[Transaction] = []
        self._default_currency = default_currency
        self._profile_lookup = profile_lookup
        self._breakdown: dict[str, float] = {}
        self._label = ""
        self._recalculate()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._transactions)

    def transactions(self) -> tuple[Transaction, ...]:
        """Snapshot of all transactions, newest first."""
        return tuple(self._transactions)

    def get(self, transaction_id: str) -> Transaction | None:
        """Find a transaction by local id."""
        index = self._index_by_id(transaction_id)
        return None if index is None else self._transactions[index]

    def find_by_hash(self, transaction_hash: str) -> Transaction | None:
        """Find a transaction by remote hash."""
        index = self._index_by_hash(transaction_hash)
        return None if index is None else self._transactions[index]

    def pending_with_hash(self) -> list[Transaction]:
        """Pending transactions that can be re-queried, newest first."""
        return [
            tx
            for tx in self._transactions
            if tx.status is TransactionStatus.PENDING and tx.remote_hash
        ]

    @property
    def default_currency(self) -> str:
        """Currency shown when there is no revenue yet."""
        return self._default_currency

    def revenue_breakdown(self) -> dict[str, float]:
        """Total display amount per currency over successful transactions."""
        return dict(self._breakdown)

    def total_revenue_label(self) -> str:
        """Summary label: one currency's total, or the number of currencies."""
        return self._label

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, transaction: Transaction) -> None:
        """Add a transaction at the front (newest first)."""
        if self._index_by_id(transaction.id) is not None:
            logger.warning("Transaction %s is already in the ledger", transaction.id)
            return
        self._transactions.insert(0, transaction)
        logger.info(
            "Recorded transaction %s (%s %s, hash=%s)",
            transaction.id,
            transaction.requested_amount,
            transaction.requested_currency,
            transaction.remote_hash,
        )
        self._recalculate()

    def update_status(
        self,
        status: TransactionStatus,
        *,
        transaction_id: str | None = None,
        transaction_hash: str | None = None,
    ) -> bool:
        """Move a transaction, identified by id or hash, to *status*.

        Returns:
            True if a transaction was updated. Missing entries and illegal
            transitions are logged and leave the ledger unchanged.
        """
        index = self._locate(transaction_id, transaction_hash)
        if index is None:
            return False
        return self._swap(index, lambda tx: tx.with_status(status))

    def attach_hash(self, transaction_id: str, transaction_hash: str) -> bool:
        """Set the backend hash of a transaction.

        Returns:
            True if the hash was set. Re-attaching the same hash changes
            nothing; a different hash is logged and rejected.
        """
        index = self._locate(transaction_id, None)
        if index is None:
            return False
        return self._swap(index, lambda tx: tx.with_hash(transaction_hash))

    def update_received_amount(
        self, transaction_hash: str, amount: str | None, currency: str | None
    ) -> bool:
        """Record the backend-confirmed amount for a transaction."""
        index = self._locate(None, transaction_hash)
        if index is None:
            return False
        return self._swap(index, lambda tx: tx.with_received(amount, currency))

    def mark_success(
        self,
        transaction_hash: str,
        received_amount: str | None = None,
        received_currency: str | None = None,
    ) -> bool:
        """Set status and received amount in a single swap."""
        index = self._locate(None, transaction_hash)
        if index is None:
            return False
        return self._swap(index, lambda tx: tx.confirmed(received_amount, received_currency))

    def set_default_currency(self, currency: str) -> None:
        """Change the currency used by the empty-revenue label."""
        self._default_currency = currency
        self._recalculate()

    # ------------------------------------------------------------------
    # Event bus wiring
    # ------------------------------------------------------------------

    def attach(self, bus: EventBus) -> None:
        """Subscribe to lifecycle and network events on *bus*."""
        bus.add_listener(self.handle_event)

    def handle_event(self, event: RawEvent) -> None:
        """Apply a lifecycle or network event to the ledger."""
        if isinstance(event, HashReceived):
            if event.submission is None:
                logger.warning("No staged submission for hash %s", event.hash)
                return
            if self._index_by_id(event.submission.id) is not None:
                self.attach_hash(event.submission.id, event.hash)
                return
            self.insert(Transaction.from_submission(event.submission, event.hash))
        elif isinstance(event, PaymentSucceeded):
            self.mark_success(event.hash, event.received_amount, event.received_currency)
        elif isinstance(event, PaymentFailed):
            if event.hash:
                self.update_status(TransactionStatus.FAILED, transaction_hash=event.hash)
        elif isinstance(event, NetworkChanged) and self._profile_lookup is not None:
            self.set_default_currency(self._profile_lookup(event.network_id).default_currency)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _index_by_id(self, transaction_id: str) -> int | None:
        for i, tx in enumerate(self._transactions):
            if tx.id == transaction_id:
                return i
        return None

    def _index_by_hash(self, transaction_hash: str) -> int | None:
        for i, tx in enumerate(self._transactions):
            if tx.remote_hash == transaction_hash:
                return i
        return None

    def _locate(self, transaction_id: str | None, transaction_hash: str | None) -> int | None:
        if transaction_id is not None:
            index = self._index_by_id(transaction_id)
        elif transaction_hash is not None:
            index = self._index_by_hash(transaction_hash)
        else:
            msg = "transaction_id or transaction_hash is required"
            raise ValueError(msg)
        if index is None:
            logger.warning(
                "Could not find transaction (id=%s, hash=%s)", transaction_id, transaction_hash
            )
        return index

    def _swap(self, index: int, change: Callable[[Transaction], Transaction]) -> bool:
        current = self._transactions[index]
        try:
            updated = change(current)
        except CheckoutError as exc:
            logger.warning("Ignoring update to transaction %s: %s", current.id, exc.message)
            return False
        if updated is current:
            return False
        self._transactions[index] = updated
        logger.info("Transaction %s is now %s", updated.id, updated.status.value)
        self._recalculate()
        return True

    def _recalculate(self) -> None:
        totals: dict[str, float] = {}
        for tx in self._transactions:
            if tx.status is not TransactionStatus.SUCCESS:
                continue
            units, currency = tx.revenue_units
            totals[currency] = totals.get(currency, 0.0) + from_smallest_unit(units, currency)
        self._breakdown = totals

        if not totals:
            self._label = format_amount(0.0, self._default_currency)
        elif len(totals) == 1:
            currency, amount = next(iter(totals.items()))
            self._label = format_amount(amount, currency)
        else:
            self._label = f"{len(totals)} Currencies"
        logger.debug("Revenue updated: %s %s", self._label, totals)
