"""Application Enforcement — field rules for fundraiser applications."""

import re
from dataclasses import dataclass

from app.core.domain_types import WalletAddress
from app.core.errors import ValidationError
from app.core.wallet_address import normalize_wallet

PHONE_ALLOWED = re.compile(r"^\+?[0-9\s\-().]+$")
PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15

REQUIRED_FIELDS = (
    "full_name", "project_name", "wallet_address",
    "phone_number", "project_description",
)


@dataclass(frozen=True)
class ApplicationFields:
    full_name: str
    project_name: str
    wallet_address: str
    phone_number: str
    project_description: str
    file_reference: str | None = None


def check_phone_number(value: str) -> None:
    digits = sum(ch.isdigit() for ch in value)
    if not PHONE_ALLOWED.match(value) or not (
        PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS
    ):
        raise ValidationError("phone_number is not a valid phone number", "phone_number")


def validate_application(fields: ApplicationFields) -> ApplicationFields:
    """Return a cleaned copy (stripped, wallet normalized) or raise ValidationError."""
    for name in REQUIRED_FIELDS:
        if not getattr(fields, name).strip():
            raise ValidationError(f"{name} is required", name)
    wallet: WalletAddress = normalize_wallet(fields.wallet_address)
    phone = fields.phone_number.strip()
    check_phone_number(phone)
    file_reference = (fields.file_reference or "").strip() or None
    return ApplicationFields(
        full_name=fields.full_name.strip(),
        project_name=fields.project_name.strip(),
        wallet_address=wallet,
        phone_number=phone,
        project_description=fields.project_description.strip(),
        file_reference=file_reference,
    )
