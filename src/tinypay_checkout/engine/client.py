"""CheckoutEngine — central engine owning the checkout services."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Self

from tinypay_checkout.errors.checkout_errors import (
    InvalidAddressError,
    UnsupportedCurrencyError,
)
from tinypay_checkout.lifecycle.states import CheckoutContext
from tinypay_checkout.networks import address as address_validator
from tinypay_checkout.networks.registry import valid_currency
from tinypay_checkout.networks.units import parse_amount
from tinypay_checkout.notifications.events import NetworkChanged

if TYPE_CHECKING:
    from types import TracebackType

    from tinypay_checkout.config.settings import AppConfig
    from tinypay_checkout.ledger.ledger import Ledger
    from tinypay_checkout.lifecycle.controller import LifecycleController
    from tinypay_checkout.lifecycle.states import LifecycleOutcome
    from tinypay_checkout.networks.profiles import NetworkProfile
    from tinypay_checkout.networks.registry import NetworkRegistry
    from tinypay_checkout.notifications.events import RawEvent
    from tinypay_checkout.notifications.service import EventBus
    from tinypay_checkout.payments.client import PaymentClient
    from tinypay_checkout.store.client import StoreClient
    from tinypay_checkout.store.preferences import Preferences

logger = logging.getLogger(__name__)

# Error messages
_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class CheckoutEngine:
    """Central engine that owns the store, registry, ledger and controller.

    Holds the merchant's amount/currency selection and builds an explicit
    :class:`CheckoutContext` for every scan from persisted state.

    Usage::

        async with CheckoutEngine(config) as engine:
            events = engine.bus.add_subscriber("ui")
            await engine.set_amount("1.5", "SOL")
            outcome = await engine.scan(payload)
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize engine with configuration.

        Args:
            config: Application configuration with backend, polling and store settings.
        """
        self._config = config
        self._initialized = False

        self._store: StoreClient | None = None
        self._preferences: Preferences | None = None
        self._bus: EventBus | None = None
        self._registry: NetworkRegistry | None = None
        self._ledger: Ledger | None = None
        self._payment_client: PaymentClient | None = None
        self._controller: LifecycleController | None = None

        self._amount = ""
        self._currency: str | None = None
        self._tasks: set[asyncio.Task[LifecycleOutcome]] = set()

    async def initialize(self) -> None:
        """Connect the store and payment client and wire the event bus.

        Raises:
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        from tinypay_checkout.ledger.ledger import Ledger
        from tinypay_checkout.lifecycle.controller import LifecycleController
        from tinypay_checkout.networks.registry import NetworkRegistry
        from tinypay_checkout.notifications.service import EventBus
        from tinypay_checkout.payments.client import PaymentClient
        from tinypay_checkout.store.client import StoreClient
        from tinypay_checkout.store.preferences import Preferences

        self._store = StoreClient(self._config.store)
        await self._store.connect()
        self._preferences = Preferences(self._store)

        self._bus = EventBus()
        self._registry = NetworkRegistry(
            self._preferences, self._bus, fallback_id=self._config.default_network
        )
        profile = await self._registry.current_profile()

        # The ledger must see every event before any other listener.
        self._ledger = Ledger(
            default_currency=profile.default_currency,
            profile_lookup=self._registry.profile,
        )
        self._ledger.attach(self._bus)
        self._bus.add_listener(self._on_event)

        self._payment_client = PaymentClient(self._config.backend)
        await self._payment_client.connect()
        self._controller = LifecycleController(
            self._payment_client, self._bus, self._config.polling
        )

        self._currency = profile.default_currency
        self._initialized = True
        logger.info("Checkout engine ready on %s", profile.display_name)

    async def close(self) -> None:
        """Wait for in-flight scans, then close all connections.

        Can be called multiple times (idempotent).
        """
        if not self._initialized:
            return

        await self.wait_idle()

        if self._payment_client is not None:
            await self._payment_client.close()
            self._payment_client = None
        if self._bus is not None:
            self._bus.remove_listener(self._on_event)
        if self._store is not None:
            await self._store.close()
            self._store = None

        self._controller = None
        self._initialized = False

    async def __aenter__(self) -> Self:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Component accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> AppConfig:
        """Application configuration."""
        return self._config

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def bus(self) -> EventBus:
        """Event bus for UI subscribers."""
        if self._bus is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._bus

    @property
    def ledger(self) -> Ledger:
        """Transaction ledger."""
        if self._ledger is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._ledger

    @property
    def registry(self) -> NetworkRegistry:
        """Network registry."""
        if self._registry is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._registry

    @property
    def preferences(self) -> Preferences:
        """Persisted merchant preferences."""
        if self._preferences is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._preferences

    @property
    def payment_client(self) -> PaymentClient:
        """Payment backend client."""
        if self._payment_client is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._payment_client

    @property
    def controller(self) -> LifecycleController:
        """Transaction lifecycle controller."""
        if self._controller is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._controller

    # ------------------------------------------------------------------
    # Onboarding and settings
    # ------------------------------------------------------------------

    async def is_onboarded(self) -> bool:
        """Whether the merchant has saved a receiving address."""
        return await self.preferences.onboarding_completed()

    async def complete_onboarding(self, receiving_address: str) -> None:
        """Validate and save the receiving address and mark onboarding done.

        Raises:
            InvalidAddressError: If the address is malformed for the current network.
        """
        await self.set_receiving_address(receiving_address)
        await self.preferences.set_onboarding_completed(True)
        logger.info("Onboarding completed")

    async def set_receiving_address(self, receiving_address: str) -> None:
        """Validate and persist the merchant receiving address.

        Raises:
            InvalidAddressError: If the address is malformed for the current network.
        """
        address = receiving_address.strip()
        profile = await self.registry.current_profile()
        if not address_validator.is_valid(address, profile):
            raise InvalidAddressError(
                address_validator.format_error(profile),
                example=address_validator.example(profile),
            )
        await self.preferences.set_receiving_address(address)

    async def set_network(self, network_id: str) -> NetworkProfile:
        """Switch the selected network (emits ``NetworkChanged``)."""
        return await self.registry.set_current(network_id)

    # ------------------------------------------------------------------
    # Amount selection
    # ------------------------------------------------------------------

    @property
    def amount(self) -> str:
        """Amount as entered by the merchant (may be empty)."""
        return self._amount

    @property
    def currency(self) -> str | None:
        """Currently selected currency."""
        return self._currency

    async def set_amount(self, amount: str, currency: str | None = None) -> None:
        """Set the bill amount and, optionally, its currency.

        Raises:
            AmountParseError: If a non-empty amount is not a number or is too
                large for the currency's smallest unit.
            UnsupportedCurrencyError: If the currency is not on the current network.
        """
        profile = await self.registry.current_profile()
        if currency is not None and not profile.supports(currency):
            raise UnsupportedCurrencyError(currency, profile.id)
        selected = valid_currency(currency or self._currency, profile)
        text = amount.strip()
        if text:
            parse_amount(text, selected)
        self._amount = text
        self._currency = selected

    async def context(self) -> CheckoutContext:
        """Build the checkout context for the next scan from persisted state."""
        profile = await self.registry.current_profile()
        return CheckoutContext(
            profile=profile,
            payee_address=await self.preferences.receiving_address(),
            amount=self._amount,
            currency=valid_currency(self._currency, profile),
        )

    # ------------------------------------------------------------------
    # Scanning and refresh
    # ------------------------------------------------------------------

    async def scan(self, raw: str) -> LifecycleOutcome:
        """Run one scanned payload through the lifecycle to a terminal state.

        Raises:
            QRFormatError: If the payload is invalid.
            SubmissionInProgressError: If another submission is staged.
        """
        return await self.controller.process_scan(raw, await self.context())

    async def scan_in_background(self, raw: str) -> asyncio.Task[LifecycleOutcome]:
        """Validate a payload now and process it in a tracked task.

        Raises:
            QRFormatError: If the payload is invalid.
            SubmissionInProgressError: If another submission is staged.
        """
        context = await self.context()
        submission = self.controller.stage(raw, context)
        task = asyncio.create_task(self.controller.submit_staged(submission, context))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    async def wait_idle(self) -> None:
        """Wait until every background scan has reached a terminal state."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def refresh(self) -> int:
        """Re-query every pending transaction once.

        Returns:
            Number of transactions whose status changed.
        """
        profile = await self.registry.current_profile()
        return await self.controller.refresh_pending(self.ledger, profile.id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _on_event(self, event: RawEvent) -> None:
        if isinstance(event, NetworkChanged):
            profile = self.registry.profile(event.network_id)
            selected = valid_currency(self._currency, profile)
            if selected != self._currency:
                logger.info(
                    "Currency %s unsupported on %s, using %s", self._currency, profile.id, selected
                )
            self._currency = selected

    def _task_done(self, task: asyncio.Task[LifecycleOutcome]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background scan failed: %s", exc)
