"""Tests for network profiles and the profile invariants."""

from __future__ import annotations

import pytest

from tinypay_checkout.networks.profiles import PROFILES, SOLANA_DEVNET, NetworkProfile


def _profile(**overrides) -> NetworkProfile:
    defaults = {
        "id": "test-net",
        "display_name": "Test Net",
        "supported_currencies": ("SOL", "USDC"),
        "default_currency": "SOL",
        "address_length": 4,
        "address_pattern": "^[a-z]{4}$",
        "qr_grammar": r"^addr:([a-z]{4})\s+otp:(0x[0-9a-fA-F]{64})$",
        "explorer_url_template": "https://explorer.test/{hash}",
    }
    defaults.update(overrides)
    return NetworkProfile(**defaults)


class TestSolanaDevnet:
    def test_registered(self):
        assert PROFILES["solana-devnet"] is SOLANA_DEVNET

    def test_currencies(self):
        assert SOLANA_DEVNET.supported_currencies == ("SOL", "USDT", "USDC")
        assert SOLANA_DEVNET.default_currency == "SOL"

    def test_address_contract(self):
        assert SOLANA_DEVNET.address_length == 44
        assert SOLANA_DEVNET.address_pattern == "^[1-9A-HJ-NP-Za-km-z]{44}$"
        assert SOLANA_DEVNET.address_case_sensitive is True

    def test_explorer_url(self):
        assert SOLANA_DEVNET.explorer_url("abc") == "https://explorer.solana.com/tx/abc"

    def test_supports(self):
        assert SOLANA_DEVNET.supports("USDC")
        assert not SOLANA_DEVNET.supports("ETH")

    def test_format_description_mentions_fields(self):
        text = SOLANA_DEVNET.qr_format_description
        assert "Solana Devnet" in text
        assert "44-char" in text
        assert "otp:0x[64-digit hex]" in text


class TestProfileInvariants:
    def test_valid_profile(self):
        assert _profile().id == "test-net"

    def test_empty_currencies_rejected(self):
        with pytest.raises(ValueError, match="at least one currency"):
            _profile(supported_currencies=(), default_currency="SOL")

    def test_default_must_be_supported(self):
        with pytest.raises(ValueError, match="default currency"):
            _profile(default_currency="USDT")

    def test_every_currency_needs_decimals(self):
        with pytest.raises(ValueError, match="decimal precision.*DOGE"):
            _profile(supported_currencies=("SOL", "DOGE"))

    def test_explorer_template_needs_placeholder(self):
        with pytest.raises(ValueError, match="placeholder"):
            _profile(explorer_url_template="https://explorer.test/")

    def test_frozen(self):
        profile = _profile()
        with pytest.raises(AttributeError):
            profile.id = "other"  # type: ignore[misc]
