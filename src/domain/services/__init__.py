"""Domain services package."""

from .normalization import (
    normalize_currency_code,
    normalize_description,
    normalize_identifier,
)
from .transfers import (
    apply_transfer,
    build_transfer_audit_record,
    build_transfer_entries,
    ensure_account_access,
    ensure_same_currency,
    ensure_sufficient_funds,
    validate_transfer_request,
)
from .validation import validate_amount, validate_balance_sign

__all__ = [
    "apply_transfer",
    "build_transfer_audit_record",
    "build_transfer_entries",
    "ensure_account_access",
    "ensure_same_currency",
    "ensure_sufficient_funds",
    "validate_transfer_request",
    "normalize_currency_code",
    "normalize_description",
    "normalize_identifier",
    "validate_amount",
    "validate_balance_sign",
]
