"""QR payload parsing — extract the payer address and otp from a scan.

The payload is two fields separated by whitespace or newlines::

    addr:6eQDtnQ7qX3Tiwqzuz8uKZHBHWKzxs3KPScMbY1DM4i6
    otp:0x1234...cdef

The grammar comes from the active :class:`NetworkProfile`. The extracted
address is re-checked with the address validator because the grammar and the
address pattern are maintained separately.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from tinypay_checkout.errors.checkout_errors import QRFormatError
from tinypay_checkout.networks import address as address_validator

if TYPE_CHECKING:
    from tinypay_checkout.networks.profiles import NetworkProfile

logger = logging.getLogger(__name__)

OTP_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


@dataclass(frozen=True)
class ParsedPayment:
    """Validated contents of a scanned payer QR code."""

    payer_address: str
    otp: str

    @property
    def bare_otp(self) -> str:
        """The otp without its ``0x`` prefix, as sent over the wire."""
        return strip_hex_prefix(self.otp)


def strip_hex_prefix(value: str) -> str:
    """Remove a leading ``0x`` if present."""
    return value[2:] if value.startswith("0x") else value


@lru_cache(maxsize=32)
def _grammar(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def parse(raw: object, profile: NetworkProfile) -> ParsedPayment | None:
    """Parse a scanned payload for *profile*.

    Returns:
        The parsed payment, or ``None`` when any check fails. A partially
        populated result is never returned.
    """
    if not isinstance(raw, str):
        logger.debug("QR payload rejected: not a string (%s)", type(raw).__name__)
        return None

    normalized = raw.strip()
    match = _grammar(profile.qr_grammar).fullmatch(normalized)
    if match is None or match.lastindex != 2:
        logger.debug("QR payload does not match the %s grammar: %r", profile.id, normalized)
        return None

    addr = match.group(1)
    otp = match.group(2).lower()
    if not profile.address_case_sensitive:
        addr = addr.lower()

    if not address_validator.is_valid(addr, profile):
        logger.debug("QR address rejected: %s (%s)", addr, profile.address_format_error)
        return None

    if OTP_PATTERN.fullmatch(otp) is None:
        logger.debug("QR otp rejected: %s", otp)
        return None

    logger.debug("QR payload parsed: addr=%s", addr)
    return ParsedPayment(payer_address=addr, otp=otp)


def parse_or_raise(raw: object, profile: NetworkProfile) -> ParsedPayment:
    """Parse a scanned payload, raising instead of returning ``None``.

    Raises:
        QRFormatError: If the payload is invalid for *profile*.
    """
    parsed = parse(raw, profile)
    if parsed is None:
        raise QRFormatError(
            "The QR code format is incorrect.",
            description=profile.qr_format_description,
        )
    return parsed
