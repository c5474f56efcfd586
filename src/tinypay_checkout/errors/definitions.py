"""Backend business codes and their human-readable messages."""

from __future__ import annotations

import enum


class BusinessCode(enum.IntEnum):
    """Application-level result codes returned in the response envelope."""

    CREATED = 1001
    PENDING = 1002
    CONFIRMED = 1003
    NON_POSITIVE_AMOUNT = 2000
    OVER_LIMIT = 2001
    INSUFFICIENT_BALANCE = 2002
    INCORRECT_OTP = 2003
    MISSING_FIELD = 2004
    TRANSACTION_NOT_FOUND = 2005
    INVALID_TOKEN = 2006

    @classmethod
    def is_failure(cls, code: int) -> bool:
        """Whether *code* denotes a business failure."""
        return code >= FAILURE_THRESHOLD


FAILURE_THRESHOLD = 2000

UNKNOWN_ERROR_MESSAGE = "Unknown Error"

# -- Messages shown to the merchant ----------------------------------------

BUSINESS_MESSAGES: dict[int, str] = {
    BusinessCode.NON_POSITIVE_AMOUNT: "Bill must bigger than 0",
    BusinessCode.OVER_LIMIT: "Over limit",
    BusinessCode.INSUFFICIENT_BALANCE: "Insufficient balance",
    BusinessCode.INCORRECT_OTP: "OTP incorrect",
    BusinessCode.MISSING_FIELD: "Missing field",
    BusinessCode.TRANSACTION_NOT_FOUND: "TX not exist",
    BusinessCode.INVALID_TOKEN: "Invalid token",
}


def message_for(code: int) -> str:
    """Return the merchant-facing message for a business failure code."""
    return BUSINESS_MESSAGES.get(code, UNKNOWN_ERROR_MESSAGE)
