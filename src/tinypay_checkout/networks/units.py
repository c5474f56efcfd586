"""Unit conversion between integer smallest units and decimal display amounts.

Amounts cross the merchant boundary as decimal strings (``"1.5"``) and the
wire as integer smallest-unit strings (``"1500000000"``). Conversion goes
through a float, so precision beyond the currency's decimals may be lost.
"""

from __future__ import annotations

import logging
import math

from tinypay_checkout.errors.checkout_errors import AmountParseError
from tinypay_checkout.networks.profiles import CURRENCY_DECIMALS, DEFAULT_DECIMALS

logger = logging.getLogger(__name__)


def decimals(currency: str) -> int:
    """Return the number of decimal places for *currency* (6 if unknown)."""
    return CURRENCY_DECIMALS.get(currency, DEFAULT_DECIMALS)


def parse_amount(text: object, currency: str | None = None) -> float:
    """Parse an amount string into a finite float.

    With *currency*, the amount must also stay finite once scaled to that
    currency's smallest unit.

    Raises:
        AmountParseError: If *text* is empty, non-numeric, NaN or infinite.
    """
    if isinstance(text, bool) or not isinstance(text, (str, int, float)):
        raise AmountParseError(text)
    if isinstance(text, str):
        text_value = text.strip()
        if not text_value:
            raise AmountParseError(text)
        try:
            value = float(text_value)
        except ValueError as exc:
            raise AmountParseError(text) from exc
    else:
        value = float(text)
    if not math.isfinite(value):
        raise AmountParseError(text)
    if currency is not None and not math.isfinite(value * 10 ** decimals(currency)):
        raise AmountParseError(text)
    return value


def to_smallest_unit(amount: object, currency: str) -> int:
    """Convert a decimal display amount to integer smallest units.

    Unparseable input converts to ``0``; this function never raises.

    Example::

        to_smallest_unit("1.5", "SOL")  # 1_500_000_000
    """
    try:
        value = parse_amount(amount, currency)
    except AmountParseError:
        logger.debug("Unparseable amount %r for %s, using 0", amount, currency)
        return 0
    return int(value * 10 ** decimals(currency))


def from_smallest_unit(units: object, currency: str) -> float:
    """Convert an integer smallest-unit amount to its decimal display value.

    Unparseable input converts to ``0.0``; this function never raises.
    """
    try:
        value = parse_amount(units)
    except AmountParseError:
        logger.debug("Unparseable unit amount %r for %s, using 0.0", units, currency)
        return 0.0
    return value / 10 ** decimals(currency)


def format_amount(value: float, currency: str, places: int = 2) -> str:
    """Format a display amount with its currency, e.g. ``"1.50 SOL"``."""
    return f"{value:.{places}f} {currency}"
