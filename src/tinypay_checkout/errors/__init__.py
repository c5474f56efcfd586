"""Errors — checkout exception taxonomy and backend business codes."""

from __future__ import annotations

from tinypay_checkout.errors.checkout_errors import (
    AmountParseError,
    CheckoutError,
    FormatError,
    ImmutableHashError,
    InvalidAddressError,
    InvalidTransitionError,
    NetworkNotFoundError,
    QRFormatError,
    StoreError,
    SubmissionInProgressError,
    UnsupportedCurrencyError,
    ValidationError,
)
from tinypay_checkout.errors.definitions import BusinessCode, message_for
from tinypay_checkout.errors.payment_errors import BusinessError, TransportError

__all__ = [
    "AmountParseError",
    "BusinessCode",
    "BusinessError",
    "CheckoutError",
    "FormatError",
    "ImmutableHashError",
    "InvalidAddressError",
    "InvalidTransitionError",
    "NetworkNotFoundError",
    "QRFormatError",
    "StoreError",
    "SubmissionInProgressError",
    "TransportError",
    "UnsupportedCurrencyError",
    "ValidationError",
    "message_for",
]
