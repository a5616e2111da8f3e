"""Domain models package."""

from .accounts import Account
from .ledger import AuditRecord, LedgerEntry
from .transfers import (
    LedgerVerificationResult,
    TransferRequest,
    TransferResult,
)

__all__ = [
    "Account",
    "AuditRecord",
    "LedgerEntry",
    "LedgerVerificationResult",
    "TransferRequest",
    "TransferResult",
]
