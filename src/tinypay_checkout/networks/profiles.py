"""Network profiles — static per-network metadata.

Each supported network is described by an immutable :class:`NetworkProfile`
holding its currencies, wallet address format, QR payload grammar and block
explorer URL template.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Currency precision
# ---------------------------------------------------------------------------

DEFAULT_DECIMALS = 6

CURRENCY_DECIMALS: dict[str, int] = {
    "SOL": 9,  # 1 SOL = 10^9 lamports
    "USDT": 6,
    "USDC": 6,
}

_BASE58_CLASS = "[1-9A-HJ-NP-Za-km-z]"
_OTP_GROUP = "(0x[0-9a-fA-F]{64})"


# ---------------------------------------------------------------------------
# NetworkProfile
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NetworkProfile:
    """Immutable description of one supported network.

    Attributes:
        id: Stable identifier sent to the backend (e.g. ``solana-devnet``).
        display_name: Human-readable network name.
        supported_currencies: Ordered currency codes, never empty.
        default_currency: Member of ``supported_currencies``.
        address_length: Number of characters in a wallet address.
        address_pattern: Anchored regex a wallet address must fully match.
        qr_grammar: Anchored regex with two groups (address, otp).
        explorer_url_template: Explorer URL containing a ``{hash}`` placeholder.
        address_case_sensitive: Whether addresses keep their case when parsed.
        address_format_error: Message shown when an address is rejected.
        address_example: A well-formed sample address.
    """

    id: str
    display_name: str
    supported_currencies: tuple[str, ...]
    default_currency: str
    address_length: int
    address_pattern: str
    qr_grammar: str
    explorer_url_template: str
    address_case_sensitive: bool = True
    address_format_error: str = ""
    address_example: str = ""

    def __post_init__(self) -> None:
        if not self.supported_currencies:
            msg = f"network {self.id} must support at least one currency"
            raise ValueError(msg)
        if self.default_currency not in self.supported_currencies:
            msg = f"default currency {self.default_currency} is not supported on {self.id}"
            raise ValueError(msg)
        missing = [c for c in self.supported_currencies if c not in CURRENCY_DECIMALS]
        if missing:
            msg = f"network {self.id} has no decimal precision for: {', '.join(missing)}"
            raise ValueError(msg)
        if "{hash}" not in self.explorer_url_template:
            msg = f"explorer template for {self.id} lacks a {{hash}} placeholder"
            raise ValueError(msg)

    def supports(self, currency: str) -> bool:
        """Check if *currency* is supported on this network."""
        return currency in self.supported_currencies

    def explorer_url(self, transaction_hash: str) -> str:
        """Return the block explorer URL for a transaction hash."""
        return self.explorer_url_template.format(hash=transaction_hash)

    @property
    def qr_format_description(self) -> str:
        """Describe the expected QR payload for error messages."""
        return (
            f"Expected QR code format for {self.display_name}:\n"
            f"addr:[{self.address_length}-char address]\n"
            "[whitespace or newline]\n"
            "otp:0x[64-digit hex]"
        )


def _solana_devnet() -> NetworkProfile:
    length = 44
    return NetworkProfile(
        id="solana-devnet",
        display_name="Solana Devnet",
        supported_currencies=("SOL", "USDT", "USDC"),
        default_currency="SOL",
        address_length=length,
        address_pattern=f"^{_BASE58_CLASS}{{{length}}}$",
        qr_grammar=rf"^addr:({_BASE58_CLASS}{{{length}}})[\s\r\n]+otp:{_OTP_GROUP}$",
        explorer_url_template="https://explorer.solana.com/tx/{hash}",
        address_case_sensitive=True,
        address_format_error=(
            f"Address must be exactly {length} base58 characters (no '0x' prefix)."
        ),
        address_example="6eQDtnQ7qX3Tiwqzuz8uKZHBHWKzxs3KPScMbY1DM4i6",
    )


SOLANA_DEVNET = _solana_devnet()

FALLBACK_NETWORK_ID = SOLANA_DEVNET.id

PROFILES: dict[str, NetworkProfile] = {
    SOLANA_DEVNET.id: SOLANA_DEVNET,
}
