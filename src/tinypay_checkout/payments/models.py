"""Payment backend data models — request body and response envelopes.

Both endpoints answer with ``{"code": <int>, "data": {...}}``; the business
code is distinct from the HTTP status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tinypay_checkout.errors.definitions import BusinessCode, message_for


@dataclass(frozen=True)
class PaymentRequest:
    """Body of ``POST /api/payments``.

    Attributes:
        payer_addr: Payer wallet address from the QR code.
        otp: One-time code as bare hex (no ``0x``).
        payee_addr: Merchant receiving address.
        amount: Amount in the currency's smallest unit.
        currency: Currency code.
        network: Network id.
    """

    payer_addr: str
    otp: str
    payee_addr: str
    amount: int
    currency: str
    network: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON body."""
        return {
            "payer_addr": self.payer_addr,
            "otp": self.otp,
            "payee_addr": self.payee_addr,
            "amount": self.amount,
            "currency": self.currency,
            "network": self.network,
        }


def _envelope_data(body: dict[str, Any]) -> dict[str, Any]:
    data = body.get("data")
    return data if isinstance(data, dict) else {}


@dataclass(frozen=True)
class PaymentResponse:
    """Decoded payment-creation envelope."""

    code: int
    status: str | None = None
    transaction_hash: str | None = None
    missing_fields: list[str] = field(default_factory=list)

    @property
    def has_hash(self) -> bool:
        """Whether the backend returned a usable transaction hash."""
        return self.code == BusinessCode.CREATED and bool(self.transaction_hash)

    @property
    def error_message(self) -> str:
        """Merchant-facing message for the envelope's code."""
        return message_for(self.code)

    @property
    def error_details(self) -> str | None:
        """Field-level detail, e.g. ``"Missing Field: payer_addr, otp"``."""
        if self.missing_fields:
            return f"Missing Field: {', '.join(self.missing_fields)}"
        return None

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> PaymentResponse:
        """Create a PaymentResponse from the JSON envelope.

        Raises:
            ValueError: If the envelope has no integer ``code``.
        """
        code = body.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            msg = f"response envelope has no integer code: {body!r}"
            raise ValueError(msg)
        data = _envelope_data(body)
        missing = data.get("missing_fields") or []
        return cls(
            code=code,
            status=data.get("status"),
            transaction_hash=data.get("transaction_hash"),
            missing_fields=[str(f) for f in missing] if isinstance(missing, list) else [],
        )


@dataclass(frozen=True)
class StatusResponse:
    """Decoded transaction-status envelope."""

    code: int
    status: str | None = None
    received_amount: int | None = None
    currency: str | None = None

    @property
    def is_confirmed(self) -> bool:
        return self.code == BusinessCode.CONFIRMED

    @property
    def is_pending(self) -> bool:
        return self.code == BusinessCode.PENDING

    @property
    def received_amount_text(self) -> str | None:
        """Received amount as the integer string stored on a transaction."""
        return None if self.received_amount is None else str(self.received_amount)

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> StatusResponse:
        """Create a StatusResponse from the JSON envelope.

        Raises:
            ValueError: If the envelope has no integer ``code``.
        """
        code = body.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            msg = f"response envelope has no integer code: {body!r}"
            raise ValueError(msg)
        data = _envelope_data(body)
        received = data.get("received_amount")
        if isinstance(received, bool) or not isinstance(received, int):
            received = None
        return cls(
            code=code,
            status=data.get("status"),
            received_amount=received,
            currency=data.get("currency"),
        )
