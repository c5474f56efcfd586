"""Tests for the YAML file store."""

from __future__ import annotations

import pytest
import yaml

from tinypay_checkout.config.settings import StoreConfig, StoreEngine
from tinypay_checkout.errors.checkout_errors import StoreError
from tinypay_checkout.store.yaml_file import YamlFileStore


def _store(path) -> YamlFileStore:
    return YamlFileStore(StoreConfig(engine=StoreEngine.YAML, path=str(path)))


class TestYamlFileStore:
    async def test_missing_file_is_empty(self, tmp_path):
        store = _store(tmp_path / "prefs.yaml")
        await store.connect()
        assert await store.keys() == []

    async def test_set_flushes(self, tmp_path):
        path = tmp_path / "nested" / "prefs.yaml"
        store = _store(path)
        await store.connect()
        await store.set("selected_network", "solana-devnet")
        await store.set("onboarding_completed", True)
        assert yaml.safe_load(path.read_text()) == {
            "onboarding_completed": True,
            "selected_network": "solana-devnet",
        }

    async def test_survives_reconnect(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        store = _store(path)
        await store.connect()
        await store.set("receiving_address", "abc")
        await store.close()
        assert await store.get("receiving_address") is None

        reopened = _store(path)
        await reopened.connect()
        assert await reopened.get("receiving_address") == "abc"

    async def test_delete(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        store = _store(path)
        await store.connect()
        await store.set("k", "v")
        assert await store.delete("k") is True
        assert await store.delete("k") is False
        assert yaml.safe_load(path.read_text()) == {}

    async def test_delete_key_holding_none(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        store = _store(path)
        await store.connect()
        await store.set("k", None)
        await store.set("other", 1)
        assert await store.delete("k") is True
        assert yaml.safe_load(path.read_text()) == {"other": 1}

    async def test_non_mapping_content_ignored(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        path.write_text("- just\n- a list\n")
        store = _store(path)
        await store.connect()
        assert await store.keys() == []

    async def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        path.write_text("key: [unclosed\n")
        store = _store(path)
        with pytest.raises(StoreError, match="failed to read"):
            await store.connect()

    def test_path(self, tmp_path):
        assert _store(tmp_path / "p.yaml").path == tmp_path / "p.yaml"
