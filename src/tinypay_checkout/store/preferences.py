"""Typed accessors for the merchant's persisted preferences."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tinypay_checkout.store.client import StoreClient

RECEIVING_ADDRESS_KEY = "receiving_address"
SELECTED_NETWORK_KEY = "selected_network"
ONBOARDING_COMPLETED_KEY = "onboarding_completed"


class Preferences:
    """Read/write the three persisted checkout settings through a store."""

    def __init__(self, store: StoreClient) -> None:
        self._store = store

    async def receiving_address(self) -> str:
        value = await self._store.get(RECEIVING_ADDRESS_KEY, "")
        return value if isinstance(value, str) else ""

    async def set_receiving_address(self, address: str) -> None:
        await self._store.set(RECEIVING_ADDRESS_KEY, address)

    async def selected_network(self) -> str | None:
        value = await self._store.get(SELECTED_NETWORK_KEY)
        return value if isinstance(value, str) and value else None

    async def set_selected_network(self, network_id: str) -> None:
        await self._store.set(SELECTED_NETWORK_KEY, network_id)

    async def onboarding_completed(self) -> bool:
        return await self._store.get(ONBOARDING_COMPLETED_KEY, False) is True

    async def set_onboarding_completed(self, completed: bool = True) -> None:
        await self._store.set(ONBOARDING_COMPLETED_KEY, completed)
