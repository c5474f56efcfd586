"""In-memory preference store (process-local, lost on exit)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tinypay_checkout.config.settings import StoreConfig


class MemoryStore:
    """Dict-backed key-value store for development and testing."""

    def __init__(self, config: StoreConfig | None = None) -> None:
        self._config = config
        self._data: dict[str, Any] = {}

    async def connect(self) -> None:  # noqa: ASYNC910
        """Connect (no-op for in-memory)."""

    async def close(self) -> None:  # noqa: ASYNC910
        """Close and clear the store."""
        self._data.clear()

    async def get(self, key: str, default: Any = None) -> Any:  # noqa: ASYNC910
        """Get a value, or *default* if the key is unset."""
        return self._data.get(key, default)

    async def set(self, key: str, value: Any) -> None:  # noqa: ASYNC910
        """Set a value."""
        self._data[key] = value

    async def delete(self, key: str) -> bool:  # noqa: ASYNC910
        """Delete a key.

        Returns:
            True if the key existed.
        """
        if key not in self._data:
            return False
        del self._data[key]
        return True

    async def keys(self) -> list[str]:  # noqa: ASYNC910
        """List all stored keys."""
        return list(self._data)
