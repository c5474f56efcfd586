"""Wallet address validation, parameterised by network profile."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tinypay_checkout.networks.profiles import NetworkProfile


@lru_cache(maxsize=32)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def is_valid(address: object, profile: NetworkProfile) -> bool:
    """Check if *address* fully matches the profile's address pattern.

    Partial matches, surrounding whitespace and a trailing newline are all
    rejected.
    """
    if not isinstance(address, str):
        return False
    return _compile(profile.address_pattern).fullmatch(address) is not None


def format_error(profile: NetworkProfile) -> str:
    """Return the message shown when an address fails validation."""
    return profile.address_format_error


def example(profile: NetworkProfile) -> str:
    """Return a well-formed sample address for the profile."""
    return profile.address_example
