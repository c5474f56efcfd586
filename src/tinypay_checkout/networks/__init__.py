"""Networks — profiles, address validation, QR parsing and unit conversion."""

from __future__ import annotations

from tinypay_checkout.networks.profiles import PROFILES, SOLANA_DEVNET, NetworkProfile
from tinypay_checkout.networks.qrcode import ParsedPayment, parse, parse_or_raise
from tinypay_checkout.networks.registry import NetworkRegistry, valid_currency
from tinypay_checkout.networks.units import decimals, from_smallest_unit, to_smallest_unit

__all__ = [
    "PROFILES",
    "SOLANA_DEVNET",
    "NetworkProfile",
    "NetworkRegistry",
    "ParsedPayment",
    "decimals",
    "from_smallest_unit",
    "parse",
    "parse_or_raise",
    "to_smallest_unit",
    "valid_currency",
]
