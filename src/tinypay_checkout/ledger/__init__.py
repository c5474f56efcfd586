"""Ledger — transaction records and multi-currency revenue totals."""

from __future__ import annotations

from tinypay_checkout.ledger.ledger import Ledger
from tinypay_checkout.ledger.models import PendingSubmission, Transaction, TransactionStatus

__all__ = ["Ledger", "PendingSubmission", "Transaction", "TransactionStatus"]
