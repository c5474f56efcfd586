"""Payment backend errors: transport failures and business rejections."""

from __future__ import annotations

from tinypay_checkout.errors.checkout_errors import CheckoutError


class TransportError(CheckoutError):
    """Connectivity failure, timeout or malformed backend response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, code="transport-error")
        self.status_code = status_code


class BusinessError(CheckoutError):
    """Decoded backend rejection (HTTP status >= 400 or business code >= 2000).

    Attributes:
        business_code: The envelope ``code`` returned by the backend.
        details: Optional field-level detail (e.g. which fields were missing).
        status_code: HTTP status of the response.
    """

    def __init__(
        self,
        message: str,
        *,
        business_code: int,
        details: str | None = None,
        status_code: int = 200,
    ) -> None:
        super().__init__(message, code="business-error")
        self.business_code = business_code
        self.details = details
        self.status_code = status_code
