"""Network registry — profile lookup and the persisted network selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tinypay_checkout.errors.checkout_errors import NetworkNotFoundError
from tinypay_checkout.networks.profiles import FALLBACK_NETWORK_ID, PROFILES, NetworkProfile
from tinypay_checkout.notifications.events import NetworkChanged

if TYPE_CHECKING:
    from tinypay_checkout.notifications.service import EventBus
    from tinypay_checkout.store.preferences import Preferences

logger = logging.getLogger(__name__)


class NetworkRegistry:
    """Resolve network profiles and own the selected-network preference.

    ``set_current`` is the single update path for the selection; it persists
    the id and emits :class:`NetworkChanged` on the event bus.
    """

    def __init__(
        self,
        preferences: Preferences,
        bus: EventBus,
        *,
        fallback_id: str = FALLBACK_NETWORK_ID,
        profiles: dict[str, NetworkProfile] | None = None,
    ) -> None:
        self._preferences = preferences
        self._bus = bus
        self._profiles = dict(profiles if profiles is not None else PROFILES)
        if fallback_id not in self._profiles:
            raise NetworkNotFoundError(fallback_id)
        self._fallback_id = fallback_id

    def profile(self, network_id: str) -> NetworkProfile:
        """Look up a profile by id.

        Raises:
            NetworkNotFoundError: If no profile has that id.
        """
        try:
            return self._profiles[network_id]
        except KeyError:
            raise NetworkNotFoundError(network_id) from None

    def all_profiles(self) -> list[NetworkProfile]:
        """Return every registered profile in registration order."""
        return list(self._profiles.values())

    @property
    def fallback(self) -> NetworkProfile:
        """The profile used when nothing valid is persisted."""
        return self._profiles[self._fallback_id]

    async def current_profile(self) -> NetworkProfile:
        """Return the persisted network's profile, or the fallback."""
        network_id = await self._preferences.selected_network()
        if network_id is None:
            return self.fallback
        profile = self._profiles.get(network_id)
        if profile is None:
            logger.warning(
                "Persisted network %s is not recognised, using %s", network_id, self._fallback_id
            )
            return self.fallback
        return profile

    async def set_current(self, network_id: str) -> NetworkProfile:
        """Persist *network_id* as the selection and notify observers.

        Raises:
            NetworkNotFoundError: If no profile has that id.
        """
        profile = self.profile(network_id)
        await self._preferences.set_selected_network(profile.id)
        logger.info("Network switched to %s", profile.display_name)
        await self._bus.notify(NetworkChanged(network_id=profile.id))
        return profile


def is_currency_supported(currency: str, profile: NetworkProfile) -> bool:
    """Check if *currency* is supported on *profile*."""
    return profile.supports(currency)


def valid_currency(currency: str | None, profile: NetworkProfile) -> str:
    """Return *currency* if supported on *profile*, else the profile default."""
    if currency and profile.supports(currency):
        return currency
    return profile.default_currency
