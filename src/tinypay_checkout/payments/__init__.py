"""Payments — backend client and wire models."""

from __future__ import annotations

from tinypay_checkout.payments.client import PaymentClient
from tinypay_checkout.payments.models import PaymentRequest, PaymentResponse, StatusResponse

__all__ = ["PaymentClient", "PaymentRequest", "PaymentResponse", "StatusResponse"]
