"""Transaction lifecycle controller — submit a scanned payment and poll it.

Drives one scan through ``IDLE → SUBMITTING → AWAITING_HASH → POLLING`` to a
terminal ``SUCCESS``, ``PENDING`` or ``FAILED`` state. Ledger changes are made
by the ledger itself as the first listener on the event bus, so every event
is delivered after the ledger reflects it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from tinypay_checkout.config.settings import PollingConfig
from tinypay_checkout.errors.checkout_errors import (
    SubmissionInProgressError,
    UnsupportedCurrencyError,
)
from tinypay_checkout.errors.definitions import BusinessCode, message_for
from tinypay_checkout.errors.payment_errors import BusinessError, TransportError
from tinypay_checkout.ledger.models import PendingSubmission, TransactionStatus
from tinypay_checkout.lifecycle.states import LifecycleOutcome, LifecycleState
from tinypay_checkout.networks.qrcode import parse_or_raise
from tinypay_checkout.networks.units import to_smallest_unit
from tinypay_checkout.notifications.events import (
    HashReceived,
    PaymentFailed,
    PaymentPending,
    PaymentSucceeded,
)

if TYPE_CHECKING:
    from tinypay_checkout.ledger.ledger import Ledger
    from tinypay_checkout.ledger.models import Transaction
    from tinypay_checkout.lifecycle.states import CheckoutContext
    from tinypay_checkout.notifications.service import EventBus
    from tinypay_checkout.payments.client import PaymentClient

logger = logging.getLogger(__name__)


class LifecycleController:
    """Owns the staged submission and the bounded status-polling policy.

    At most one submission is staged at a time. A scan arriving while one is
    staged is rejected with :class:`SubmissionInProgressError`; poll loops of
    earlier transactions keep running.
    """

    def __init__(
        self,
        client: PaymentClient,
        bus: EventBus,
        polling: PollingConfig | None = None,
    ) -> None:
        self._client = client
        self._bus = bus
        self._polling = polling or PollingConfig()
        self._staged: PendingSubmission | None = None
        self._latest: PendingSubmission | None = None
        self._state = LifecycleState.IDLE

    @property
    def state(self) -> LifecycleState:
        """State of the most recently staged scan.

        Poll loops of earlier scans keep running but no longer move this
        value; their own state is reported through :class:`LifecycleOutcome`.
        """
        return self._state

    @property
    def is_submission_staged(self) -> bool:
        """Whether a submission is waiting for the backend's answer."""
        return self._staged is not None

    @property
    def staged_submission(self) -> PendingSubmission | None:
        """The staged submission, if any."""
        return self._staged

    # ------------------------------------------------------------------
    # Scan processing
    # ------------------------------------------------------------------

    def stage(self, raw: str, context: CheckoutContext) -> PendingSubmission:
        """Validate a payload and claim the submission slot for it.

        Staging does not await, so a scan issued before an earlier one reaches
        the backend is rejected here rather than inside a running task.

        Raises:
            QRFormatError: If the payload is invalid for the context's network.
            SubmissionInProgressError: If another submission is staged.
        """
        parse_or_raise(raw, context.profile)
        if self._staged is not None:
            raise SubmissionInProgressError

        amount = context.effective_amount
        submission = PendingSubmission(
            qr_content=raw,
            amount=amount,
            currency=context.currency,
            units=to_smallest_unit(amount, context.currency),
        )
        self._staged = submission
        self._latest = submission
        self._transition(submission, LifecycleState.SUBMITTING)
        return submission

    async def process_scan(self, raw: str, context: CheckoutContext) -> LifecycleOutcome:
        """Parse, submit and poll one scanned payload.

        Raises:
            QRFormatError: If the payload is invalid for the context's network.
            SubmissionInProgressError: If another submission is staged.
        """
        return await self.submit_staged(self.stage(raw, context), context)

    async def submit_staged(
        self, submission: PendingSubmission, context: CheckoutContext
    ) -> LifecycleOutcome:
        """Submit a submission returned by :meth:`stage` and poll it.

        The stage is released once the backend answers, with or without a hash.
        """
        try:
            parsed = parse_or_raise(submission.qr_content, context.profile)
            if not context.profile.supports(submission.currency):
                error = UnsupportedCurrencyError(submission.currency, context.network_id)
                self._clear_stage(submission)
                return await self._fail(submission, error.message)

            response = await self._client.submit(
                payer_address=parsed.payer_address,
                otp=parsed.otp,
                payee_address=context.payee_address,
                amount=submission.units,
                currency=submission.currency,
                network_id=context.network_id,
            )
        except (BusinessError, TransportError) as exc:
            self._clear_stage(submission)
            details = exc.details if isinstance(exc, BusinessError) else None
            return await self._fail(submission, exc.message, details)
        finally:
            self._clear_stage(submission)

        if not response.has_hash or response.transaction_hash is None:
            logger.warning("Payment accepted without a transaction hash (code %d)", response.code)
            return await self._fail(submission, response.error_message, response.error_details)

        transaction_hash = response.transaction_hash
        self._transition(submission, LifecycleState.AWAITING_HASH)
        await self._bus.notify(HashReceived(hash=transaction_hash, submission=submission))
        return await self._poll(submission, transaction_hash, context.network_id)

    async def _poll(
        self, submission: PendingSubmission, transaction_hash: str, network_id: str
    ) -> LifecycleOutcome:
        """Query the status up to ``max_attempts`` times."""
        self._transition(submission, LifecycleState.POLLING)
        max_attempts = self._polling.max_attempts

        for attempt in range(1, max_attempts + 1):
            logger.debug("Polling %s, attempt %d/%d", transaction_hash, attempt, max_attempts)
            try:
                status = await self._client.query_status(transaction_hash, network_id)
            except (TransportError, BusinessError) as exc:
                logger.warning(
                    "Status query for %s failed (attempt %d/%d): %s",
                    transaction_hash,
                    attempt,
                    max_attempts,
                    exc.message,
                )
            else:
                if status.is_confirmed:
                    await self._bus.notify(
                        PaymentSucceeded(
                            hash=transaction_hash,
                            received_amount=status.received_amount_text,
                            received_currency=status.currency,
                        )
                    )
                    self._transition(submission, LifecycleState.SUCCESS)
                    return LifecycleOutcome(
                        LifecycleState.SUCCESS, transaction_hash=transaction_hash, attempts=attempt
                    )
                if status.is_pending:
                    logger.debug("Transaction %s still pending", transaction_hash)
                else:
                    logger.warning(
                        "Unexpected status code %d for %s", status.code, transaction_hash
                    )

            if attempt < max_attempts:
                await asyncio.sleep(self._polling.interval)

        logger.info(
            "Transaction %s still pending after %d attempts", transaction_hash, max_attempts
        )
        await self._bus.notify(PaymentPending(hash=transaction_hash))
        self._transition(submission, LifecycleState.PENDING)
        return LifecycleOutcome(
            LifecycleState.PENDING, transaction_hash=transaction_hash, attempts=max_attempts
        )

    async def _fail(
        self, submission: PendingSubmission, message: str, details: str | None = None
    ) -> LifecycleOutcome:
        logger.warning("Payment failed: %s%s", message, f" ({details})" if details else "")
        await self._bus.notify(PaymentFailed(message=message, details=details))
        self._transition(submission, LifecycleState.FAILED)
        return LifecycleOutcome(LifecycleState.FAILED, message=message, details=details)

    # ------------------------------------------------------------------
    # Manual refresh
    # ------------------------------------------------------------------

    async def refresh(self, transaction: Transaction, network_id: str) -> TransactionStatus:
        """Re-query one pending transaction with a single status call.

        Returns:
            The transaction's status after applying the result. A not-found
            answer marks it failed; other errors leave it pending.
        """
        transaction_hash = transaction.remote_hash
        if transaction.status is not TransactionStatus.PENDING or not transaction_hash:
            return transaction.status

        try:
            status = await self._client.query_status(transaction_hash, network_id)
        except BusinessError as exc:
            if exc.business_code == BusinessCode.TRANSACTION_NOT_FOUND:
                await self._bus.notify(
                    PaymentFailed(
                        message=message_for(BusinessCode.TRANSACTION_NOT_FOUND),
                        hash=transaction_hash,
                    )
                )
                return TransactionStatus.FAILED
            logger.warning("Refresh of %s rejected: %s", transaction_hash, exc.message)
            return TransactionStatus.PENDING
        except TransportError as exc:
            logger.warning("Refresh of %s failed: %s", transaction_hash, exc.message)
            return TransactionStatus.PENDING

        if status.is_confirmed:
            await self._bus.notify(
                PaymentSucceeded(
                    hash=transaction_hash,
                    received_amount=status.received_amount_text,
                    received_currency=status.currency,
                )
            )
            return TransactionStatus.SUCCESS
        if not status.is_pending:
            logger.warning("Unexpected status code %d for %s", status.code, transaction_hash)
        return TransactionStatus.PENDING

    async def refresh_pending(self, ledger: Ledger, network_id: str) -> int:
        """Refresh every pending ledger transaction that has a hash.

        Returns:
            Number of transactions whose status changed.
        """
        pending = ledger.pending_with_hash()
        if not pending:
            logger.debug("No pending transactions to refresh")
            return 0

        changed = 0
        for transaction in pending:
            if await self.refresh(transaction, network_id) is not TransactionStatus.PENDING:
                changed += 1
        logger.info("Refreshed %d pending transaction(s), %d changed", len(pending), changed)
        return changed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _clear_stage(self, submission: PendingSubmission) -> None:
        if self._staged is submission:
            self._staged = None

    def _transition(self, submission: PendingSubmission, state: LifecycleState) -> None:
        if submission is not self._latest:
            logger.debug("Scan %s reached %s (superseded)", submission.id, state.value)
            return
        logger.debug("Lifecycle %s -> %s", self._state.value, state.value)
        self._state = state
