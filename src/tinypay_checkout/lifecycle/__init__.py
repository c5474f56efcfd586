"""Lifecycle — the scan-to-terminal-state payment controller."""

from __future__ import annotations

from tinypay_checkout.lifecycle.controller import LifecycleController
from tinypay_checkout.lifecycle.states import CheckoutContext, LifecycleOutcome, LifecycleState

__all__ = ["CheckoutContext", "LifecycleController", "LifecycleOutcome", "LifecycleState"]
