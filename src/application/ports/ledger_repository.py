"""Port for reading ledger data."""

from typing import Protocol

from src.domain.models import Account, AuditRecord, LedgerEntry


class LedgerRepositoryPort(Protocol):
    """Port exposing read access to accounts, entries and audit records."""

    def fetch_accounts(self) -> list[Account]:
        """Return all accounts."""

    def fetch_ledger_entries(self) -> list[LedgerEntry]:
        """Return all ledger entries."""

    def fetch_audit_records(self, action: str) -> list[AuditRecord]:
        """Return audit records for an action."""


__all__ = ["LedgerRepositoryPort"]
