"""Preference store client with in-memory and YAML file backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from tinypay_checkout.errors.checkout_errors import StoreError

if TYPE_CHECKING:
    from tinypay_checkout.config.settings import StoreConfig


class StoreClient:
    """Store abstraction that delegates to the configured backend."""

    def __init__(self, config: StoreConfig) -> None:
        """Initialize the store client with configuration.

        Args:
            config: Store configuration with engine type and file path.
        """
        self._config = config
        self._backend: StoreBackend | None = None
        self._connected = False

    async def connect(self) -> None:
        """Connect to the store backend.

        Raises:
            ValueError: If the store engine type is invalid.
        """
        from tinypay_checkout.store.memory import MemoryStore
        from tinypay_checkout.store.yaml_file import YamlFileStore

        engine = str(self._config.engine).lower()

        if engine == "yaml":
            self._backend = YamlFileStore(self._config)
        elif engine == "memory":
            self._backend = MemoryStore(self._config)
        else:
            msg = f"Unsupported store engine: {engine}"
            raise ValueError(msg)

        await self._backend.connect()
        self._connected = True

    async def close(self) -> None:
        """Close the store (idempotent)."""
        if self._backend is not None:
            await self._backend.close()
            self._backend = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if the store is connected."""
        return self._connected and self._backend is not None

    async def get(self, key: str, default: Any = None) -> Any:
        """Get a value from the store.

        Raises:
            StoreError: If not connected.
        """
        return await self._ensure_connected().get(key, default)

    async def set(self, key: str, value: Any) -> None:
        """Set a value in the store.

        Raises:
            StoreError: If not connected.
        """
        await self._ensure_connected().set(key, value)

    async def delete(self, key: str) -> bool:
        """Delete a key from the store.

        Raises:
            StoreError: If not connected.
        """
        return await self._ensure_connected().delete(key)

    def _ensure_connected(self) -> StoreBackend:
        if self._backend is None:
            msg = "Store not connected. Call connect() first."
            raise StoreError(msg)
        return self._backend


class StoreBackend(Protocol):
    """Protocol for preference store backends."""

    async def connect(self) -> None:
        """Open the backend."""
        ...

    async def close(self) -> None:
        """Close the backend."""
        ...

    async def get(self, key: str, default: Any = None) -> Any:
        """Get a value."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Set a value."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete a key."""
        ...
