"""Domain package for business rules and core models."""

from .constants import (
    ACCOUNT_TYPES,
    AUDIT_ACTION_TRANSFER,
    ENTRY_TYPE_CREDIT,
    ENTRY_TYPE_DEBIT,
)
from .errors import (
    ConcurrencyConflictError,
    CurrencyMismatchError,
    InsufficientFundsError,
    InvalidAmountError,
    SameAccountTransferError,
    TransferError,
    TransferValidationError,
    UnauthorizedAccountError,
    UnknownCategoryError,
)
from .models import (
    Account,
    AuditRecord,
    LedgerEntry,
    LedgerVerificationResult,
    TransferRequest,
    TransferResult,
)

__all__ = [
    "ACCOUNT_TYPES",
    "AUDIT_ACTION_TRANSFER",
    "ENTRY_TYPE_CREDIT",
    "ENTRY_TYPE_DEBIT",
    "ConcurrencyConflictError",
    "CurrencyMismatchError",
    "InsufficientFundsError",
    "InvalidAmountError",
    "SameAccountTransferError",
    "TransferError",
    "TransferValidationError",
    "UnauthorizedAccountError",
    "UnknownCategoryError",
    "Account",
    "AuditRecord",
    "LedgerEntry",
    "LedgerVerificationResult",
    "TransferRequest",
    "TransferResult",
]
