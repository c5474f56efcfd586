#!/usr/bin/env python3
"""TinyPay Checkout CLI — submit scanned payments and inspect their status.

    # List supported networks
    tinypay-checkout networks

    # Show or switch the selected network
    tinypay-checkout network [network_id]

    # Save the merchant receiving address (onboarding)
    tinypay-checkout setup <receiving_address>

    # Submit a scanned payload and poll until a terminal state
    tinypay-checkout scan "<payload>" [amount] [currency]

    # Query the backend for one transaction hash
    tinypay-checkout status <transaction_hash>

Settings come from ``TINYPAY_*`` environment variables or the YAML file named
by ``TINYPAY_CONFIG_PATH``. Set ``TINYPAY_STORE__ENGINE=yaml`` to keep the
receiving address and network between runs.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from tinypay_checkout.config.settings import AppConfig
from tinypay_checkout.engine.client import CheckoutEngine
from tinypay_checkout.errors.checkout_errors import CheckoutError, QRFormatError
from tinypay_checkout.lifecycle.states import LifecycleState
from tinypay_checkout.networks.profiles import PROFILES

if TYPE_CHECKING:
    from tinypay_checkout.notifications.events import RawEvent


def configure_logging(config: AppConfig) -> None:
    """Configure root logging from the application config."""
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO.
    if not config.debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def _describe(event: RawEvent) -> str:
    data = event.to_dict()
    fields = ", ".join(f"{k}={v}" for k, v in data.items() if k not in ("type", "content") and v)
    return f"[{event.type}] {fields}" if fields else f"[{event.type}]"


def _cmd_networks() -> int:
    for profile in PROFILES.values():
        currencies = ", ".join(profile.supported_currencies)
        print(f"{profile.id:<16} {profile.display_name:<16} {currencies}")
    return 0


async def _cmd_network(config: AppConfig, network_id: str | None) -> int:
    async with CheckoutEngine(config) as engine:
        if network_id is None:
            profile = await engine.registry.current_profile()
        else:
            profile = await engine.set_network(network_id)
        print(f"Network: {profile.display_name} ({profile.id})")
    return 0


async def _cmd_setup(config: AppConfig, address: str) -> int:
    async with CheckoutEngine(config) as engine:
        await engine.complete_onboarding(address)
        print(f"Receiving address saved: {address}")
    return 0


async def _cmd_scan(config: AppConfig, payload: str, amount: str, currency: str | None) -> int:
    async with CheckoutEngine(config) as engine:
        if not await engine.is_onboarded():
            print("No receiving address configured. Run: tinypay-checkout setup <address>")
            return 1
        events = engine.bus.add_subscriber("cli")
        await engine.set_amount(amount, currency)
        try:
            outcome = await engine.scan(payload)
        except QRFormatError as exc:
            print("Invalid QR Code Format")
            print(exc.description)
            return 1

        while not events.empty():
            print(_describe(events.get_nowait()))

        profile = await engine.registry.current_profile()
        if outcome.transaction_hash:
            print(f"Explorer: {profile.explorer_url(outcome.transaction_hash)}")
        print(f"Result: {outcome.state.value}")
        print(f"Total revenue: {engine.ledger.total_revenue_label()}")
        return 1 if outcome.state is LifecycleState.FAILED else 0


async def _cmd_status(config: AppConfig, transaction_hash: str) -> int:
    async with CheckoutEngine(config) as engine:
        profile = await engine.registry.current_profile()
        status = await engine.payment_client.query_status(transaction_hash, profile.id)
        print(f"Code: {status.code} ({status.status or 'unknown'})")
        if status.received_amount is not None:
            print(f"Received: {status.received_amount} {status.currency or ''}".rstrip())
    return 0


def run(argv: list[str], config: AppConfig | None = None) -> int:
    """Dispatch a CLI command and return its exit code."""
    if not argv:
        print(__doc__)
        return 1

    config = config or AppConfig()
    configure_logging(config)
    cmd = argv[0].lower()

    try:
        if cmd == "networks":
            return _cmd_networks()
        if cmd == "network":
            return asyncio.run(_cmd_network(config, argv[1] if len(argv) > 1 else None))
        if cmd == "setup":
            if len(argv) < 2:
                print("Usage: tinypay-checkout setup <receiving_address>")
                return 1
            return asyncio.run(_cmd_setup(config, argv[1]))
        if cmd == "scan":
            if len(argv) < 2:
                print('Usage: tinypay-checkout scan "<payload>" [amount] [currency]')
                return 1
            amount = argv[2] if len(argv) > 2 else ""
            currency = argv[3] if len(argv) > 3 else None
            return asyncio.run(_cmd_scan(config, argv[1], amount, currency))
        if cmd == "status":
            if len(argv) < 2:
                print("Usage: tinypay-checkout status <transaction_hash>")
                return 1
            return asyncio.run(_cmd_status(config, argv[1]))
    except CheckoutError as exc:
        print(f"Error: {exc.message}")
        return 1

    print(f"Unknown command: {cmd}")
    print(__doc__)
    return 1


def main() -> None:
    """CLI entry point."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
