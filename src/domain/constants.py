"""Domain constants for accounts and the ledger."""

ACCOUNT_TYPES = (
    "CHECKING",
    "SAVINGS",
    "CREDIT",
)

ENTRY_TYPE_DEBIT = "DEBIT"
ENTRY_TYPE_CREDIT = "CREDIT"

AUDIT_ACTION_TRANSFER = "TRANSFER"


__all__ = [
    "ACCOUNT_TYPES",
    "ENTRY_TYPE_DEBIT",
    "ENTRY_TYPE_CREDIT",
    "AUDIT_ACTION_TRANSFER",
]
