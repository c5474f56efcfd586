"""Payment backend HTTP client — submit payments and query their status.

Provides an async HTTP client for the payment API:
- POST /api/payments — Create a payment from a scanned QR code
- GET /api/payments/{transaction_hash}?network=... — Query payment status

The client performs no retries; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

import httpx

from tinypay_checkout.errors.definitions import FAILURE_THRESHOLD, message_for
from tinypay_checkout.errors.payment_errors import BusinessError, TransportError
from tinypay_checkout.networks.qrcode import strip_hex_prefix
from tinypay_checkout.payments.models import PaymentRequest, PaymentResponse, StatusResponse

if TYPE_CHECKING:
    from types import TracebackType

    from tinypay_checkout.config.settings import BackendConfig

logger = logging.getLogger(__name__)


class PaymentClient:
    """Async HTTP client for the payment backend.

    Usage::

        client = PaymentClient(config)
        await client.connect()
        try:
            response = await client.submit(...)
        finally:
            await client.close()
    """

    def __init__(self, config: BackendConfig) -> None:
        """Initialize the payment client.

        Args:
            config: Backend configuration (url, timeout, api_token).
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is not None:
            return
        headers: dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._config.api_token:
            headers["Authorization"] = f"Bearer {self._config.api_token}"

        self._client = httpx.AsyncClient(
            base_url=self._config.url.rstrip("/"),
            headers=headers,
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def submit(
        self,
        payer_address: str,
        otp: str,
        payee_address: str,
        amount: int,
        currency: str,
        network_id: str,
    ) -> PaymentResponse:
        """Create a payment on the backend.

        Args:
            payer_address: Payer wallet address from the QR code.
            otp: One-time code; a ``0x`` prefix is stripped before sending.
            payee_address: Merchant receiving address.
            amount: Amount in the currency's smallest unit.
            currency: Currency code.
            network_id: Network id.

        Returns:
            PaymentResponse for a non-failure business code.

        Raises:
            TransportError: On connectivity errors, timeouts or malformed responses.
            BusinessError: On HTTP status >= 400 or business code >= 2000.
        """
        client = self._ensure_connected()
        request = PaymentRequest(
            payer_addr=payer_address,
            otp=strip_hex_prefix(otp),
            payee_addr=payee_address,
            amount=amount,
            currency=currency,
            network=network_id,
        )
        logger.debug("Submitting payment: %s", request.to_dict())

        try:
            response = await client.post("/api/payments", json=request.to_dict())
        except httpx.HTTPError as exc:
            raise TransportError(f"Payment submission failed: {exc}") from exc

        body = self._decode(response, "submit")
        try:
            payment = PaymentResponse.from_dict(body)
        except ValueError as exc:
            raise TransportError(
                f"Malformed submit response: {exc}", status_code=response.status_code
            ) from exc

        if response.status_code >= 400 or payment.code >= FAILURE_THRESHOLD:
            raise BusinessError(
                payment.error_message,
                business_code=payment.code,
                details=payment.error_details,
                status_code=response.status_code,
            )
        return payment

    async def query_status(self, transaction_hash: str, network_id: str) -> StatusResponse:
        """Query the status of a submitted payment.

        Args:
            transaction_hash: Hash returned by :meth:`submit`.
            network_id: Network id.

        Returns:
            StatusResponse for a non-failure business code.

        Raises:
            TransportError: On connectivity errors, timeouts or malformed responses.
            BusinessError: On HTTP status >= 400 or business code >= 2000.
        """
        client = self._ensure_connected()
        logger.debug("Querying payment status: %s on %s", transaction_hash, network_id)

        try:
            response = await client.get(
                f"/api/payments/{transaction_hash}",
                params={"network": network_id},
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Payment status query failed: {exc}") from exc

        body = self._decode(response, "query_status")
        try:
            status = StatusResponse.from_dict(body)
        except ValueError as exc:
            raise TransportError(
                f"Malformed status response: {exc}", status_code=response.status_code
            ) from exc

        if response.status_code >= 400 or status.code >= FAILURE_THRESHOLD:
            raise BusinessError(
                message_for(status.code),
                business_code=status.code,
                status_code=response.status_code,
            )
        return status

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Payment client not connected. Call connect() first."
            raise TransportError(msg)
        return self._client

    @staticmethod
    def _decode(response: httpx.Response, operation: str) -> dict[str, Any]:
        """Decode a JSON object body or raise TransportError."""
        logger.debug("%s response %d: %s", operation, response.status_code, response.text)
        try:
            body = response.json()
        except ValueError as exc:
            msg = f"Payment {operation} returned invalid JSON ({response.status_code})"
            raise TransportError(msg, status_code=response.status_code) from exc
        if not isinstance(body, dict):
            msg = f"Payment {operation} returned a non-object body ({response.status_code})"
            raise TransportError(msg, status_code=response.status_code)
        return body
