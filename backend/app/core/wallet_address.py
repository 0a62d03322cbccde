"""Wallet Address Syntax — normalization and validation for donor/fundraiser wallets.

Invariants:
    - A valid address is "0x" followed by 16..64 hexadecimal digits
    - normalize_wallet() returns lowercase; stored and compared addresses are normalized
"""

import re

from app.core.domain_types import WalletAddress
from app.core.errors import ErrorContext, ValidationError

WALLET_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{16,64}$")


def is_valid_wallet(value: str) -> bool:
    return bool(WALLET_ADDRESS_PATTERN.match(value.strip()))


def normalize_wallet(value: str, field: str = "wallet_address") -> WalletAddress:
    """Return the canonical form of `value` or raise ValidationError."""
    candidate = value.strip()
    if not candidate:
        raise ValidationError(f"{field} is required", field)
    if not WALLET_ADDRESS_PATTERN.match(candidate):
        raise ValidationError(
            f"{field} is not a valid wallet address", field,
            ErrorContext(wallet=candidate),
        )
    return WalletAddress(candidate.lower())
