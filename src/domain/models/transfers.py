"""Request and result models for fund transfers."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class TransferRequest:
    """Request to move funds between two accounts of the acting user."""

    from_account_id: str
    to_account_id: str
    amount: Decimal
    acting_user_id: str
    category_id: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a committed transfer.

    Attributes:
        transfer_id: Identifier shared by both ledger entries.
        debit_entry_id: Ledger entry written against the source account.
        credit_entry_id: Ledger entry written against the destination.
        audit_id: Audit record written for the transfer.
        source_balance: Source balance after the transfer.
        destination_balance: Destination balance after the transfer.
        created_at: Timestamp shared by the entries and the audit record.
    """

    transfer_id: str
    debit_entry_id: str
    credit_entry_id: str
    audit_id: str
    source_balance: Decimal
    destination_balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class LedgerVerificationResult:
    """Summary of a ledger consistency check."""

    transfer_count: int
    account_count: int
    issues: list[str]

    @property
    def is_consistent(self) -> bool:
        """Return True when no issue was found."""
        return not self.issues


__all__ = [
    "TransferRequest",
    "TransferResult",
    "LedgerVerificationResult",
]
