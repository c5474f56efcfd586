"""YAML file preference store — survives restarts of the CLI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from tinypay_checkout.errors.checkout_errors import StoreError

if TYPE_CHECKING:
    from tinypay_checkout.config.settings import StoreConfig

logger = logging.getLogger(__name__)


class YamlFileStore:
    """Key-value store persisted as a flat YAML mapping.

    The whole mapping is loaded on :meth:`connect` and rewritten on every
    mutation.
    """

    def __init__(self, config: StoreConfig) -> None:
        self._path = Path(config.path)
        self._data: dict[str, Any] = {}

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    async def connect(self) -> None:  # noqa: ASYNC910
        """Load the backing file if it exists.

        Raises:
            StoreError: If the file exists but cannot be parsed.
        """
        if not self._path.exists():
            self._data = {}
            return
        try:
            loaded = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            msg = f"failed to read preferences from {self._path}: {exc}"
            raise StoreError(msg) from exc
        self._data = loaded if isinstance(loaded, dict) else {}
        logger.debug("Loaded %d preference(s) from %s", len(self._data), self._path)

    async def close(self) -> None:  # noqa: ASYNC910
        """Drop the in-memory copy; the file is already up to date."""
        self._data = {}

    async def get(self, key: str, default: Any = None) -> Any:  # noqa: ASYNC910
        """Get a value, or *default* if the key is unset."""
        return self._data.get(key, default)

    async def set(self, key: str, value: Any) -> None:  # noqa: ASYNC910
        """Set a value and flush the file."""
        self._data[key] = value
        self._flush()

    async def delete(self, key: str) -> bool:  # noqa: ASYNC910
        """Delete a key and flush the file.

        Returns:
            True if the key existed.
        """
        if key not in self._data:
            return False
        del self._data[key]
        self._flush()
        return True

    async def keys(self) -> list[str]:  # noqa: ASYNC910
        """List all stored keys."""
        return list(self._data)

    def _flush(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                yaml.safe_dump(self._data, default_flow_style=False, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            msg = f"failed to write preferences to {self._path}: {exc}"
            raise StoreError(msg) from exc
