"""Store — key-value persistence for merchant preferences."""

from __future__ import annotations

from tinypay_checkout.store.client import StoreClient
from tinypay_checkout.store.preferences import Preferences

__all__ = ["Preferences", "StoreClient"]
