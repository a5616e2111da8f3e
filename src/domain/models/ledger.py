"""Domain models for ledger entries and audit records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable debit or credit against one account.

    Debits carry a negative amount and credits a positive one. Both entries
    of a transfer share ``transfer_id`` and ``created_at``.
    """

    entry_id: str
    transfer_id: str
    account_id: str
    amount: Decimal
    entry_type: str
    description: str
    created_at: datetime
    category_id: str | None = None


@dataclass(frozen=True)
class AuditRecord:
    """Append-only record of a sensitive action."""

    audit_id: str
    user_id: str
    action: str
    details: str
    created_at: datetime


__all__ = ["LedgerEntry", "AuditRecord"]
