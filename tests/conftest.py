"""Shared test fixtures for the tinypay-checkout test suite."""

from __future__ import annotations

import pytest

from tinypay_checkout.config.settings import AppConfig, BackendConfig, PollingConfig

BACKEND_URL = "https://backend.test"


@pytest.fixture
def backend_config() -> BackendConfig:
    return BackendConfig(url=BACKEND_URL, timeout=5.0)


@pytest.fixture
def polling_config() -> PollingConfig:
    """Five attempts without real sleeping between them."""
    return PollingConfig(max_attempts=5, interval=0.0)


@pytest.fixture
def app_config(backend_config, polling_config) -> AppConfig:
    """Provide a test AppConfig with an in-memory store."""
    return AppConfig(debug=True, backend=backend_config, polling=polling_config)
