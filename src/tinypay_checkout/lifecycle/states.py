"""Lifecycle states, the per-scan checkout context and scan outcomes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tinypay_checkout.networks.profiles import NetworkProfile


class LifecycleState(enum.StrEnum):
    """Controller states.

    Lifecycle: IDLE → SUBMITTING → AWAITING_HASH → POLLING
               → SUCCESS | PENDING | FAILED
    SUBMITTING may also move straight to FAILED.
    """

    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_HASH = "awaiting_hash"
    POLLING = "polling"
    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (LifecycleState.SUCCESS, LifecycleState.PENDING, LifecycleState.FAILED)


@dataclass(frozen=True)
class CheckoutContext:
    """Explicit configuration for one scan, read once by the caller.

    Attributes:
        profile: Active network profile.
        payee_address: Merchant receiving address.
        amount: Amount as entered; empty or ``None`` means ``"0"``.
        currency: Selected currency code.
    """

    profile: NetworkProfile
    payee_address: str
    amount: str | None
    currency: str

    @property
    def network_id(self) -> str:
        return self.profile.id

    @property
    def effective_amount(self) -> str:
        """The amount to submit, with an unset amount treated as ``"0"``."""
        if self.amount is None or not self.amount.strip():
            return "0"
        return self.amount.strip()


@dataclass(frozen=True)
class LifecycleOutcome:
    """Terminal result of processing one scan."""

    state: LifecycleState
    transaction_hash: str | None = None
    message: str | None = None
    details: str | None = None
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state is LifecycleState.SUCCESS
