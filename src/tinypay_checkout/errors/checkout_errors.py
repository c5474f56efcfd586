"""CheckoutError — base exception class and taxonomy for checkout errors."""

from __future__ import annotations


class CheckoutError(Exception):
    """Base error for all checkout operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "checkout-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class FormatError(CheckoutError):
    """A scanned payload or address does not match the network's format.

    Recoverable: the merchant re-scans or re-enters the value.
    """

    def __init__(self, message: str, *, code: str = "format-error") -> None:
        super().__init__(message, code=code)


class QRFormatError(FormatError):
    """A QR payload failed grammar, address or otp validation."""

    def __init__(self, message: str, *, description: str = "") -> None:
        super().__init__(message, code="qr-format")
        self.description = description


class InvalidAddressError(FormatError):
    """A wallet address failed the network's address pattern."""

    def __init__(self, message: str, *, example: str = "") -> None:
        super().__init__(message, code="invalid-address")
        self.example = example


class ValidationError(CheckoutError):
    """An amount or currency is unusable for a payment request."""

    def __init__(self, message: str, *, code: str = "validation-error") -> None:
        super().__init__(message, code=code)


class AmountParseError(ValidationError):
    """An amount string could not be parsed as a finite number."""

    def __init__(self, text: object) -> None:
        super().__init__(f"invalid amount: {text!r}", code="amount-parse")
        self.text = text


class UnsupportedCurrencyError(ValidationError):
    """A currency is not supported by the selected network."""

    def __init__(self, currency: str, network_id: str) -> None:
        super().__init__(
            f"currency {currency} is not supported on {network_id}",
            code="unsupported-currency",
        )
        self.currency = currency
        self.network_id = network_id


class NetworkNotFoundError(CheckoutError):
    """No network profile is registered under the requested id."""

    def __init__(self, network_id: str) -> None:
        super().__init__(f"unknown network: {network_id}", code="network-not-found")
        self.network_id = network_id


class SubmissionInProgressError(CheckoutError):
    """A scan arrived while another submission is still staged."""

    def __init__(self, message: str = "a payment submission is already in progress") -> None:
        super().__init__(message, code="submission-in-progress")


class InvalidTransitionError(CheckoutError):
    """A transaction status change is not permitted by the state machine."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"cannot move transaction from {current} to {requested}",
            code="invalid-transition",
        )
        self.current = current
        self.requested = requested


class ImmutableHashError(CheckoutError):
    """A transaction's remote hash may only be set once."""

    def __init__(self, existing: str) -> None:
        super().__init__(f"transaction hash already set to {existing}", code="hash-immutable")
        self.existing = existing


class StoreError(CheckoutError):
    """The preference store could not be read or written."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="store-error")
