"""Ports for atomic ledger mutations."""

from contextlib import AbstractContextManager
from decimal import Decimal
from typing import Protocol

from src.domain.models import Account, AuditRecord, LedgerEntry


class LedgerSessionPort(Protocol):
    """Operations available inside one atomic unit of work.

    Nothing written through a session is visible to other sessions until the
    unit of work commits, and nothing is kept when it rolls back.
    """

    def lock_accounts(self, account_ids: list[str]) -> dict[str, Account]:
        """Lock and return the requested accounts keyed by id.

        Rows are locked in ascending id order. Missing ids are absent from
        the returned mapping.
        """

    def category_exists(self, category_id: str, user_id: str) -> bool:
        """Return True when the category belongs to the user."""

    def update_balance(
        self,
        account_id: str,
        new_balance: Decimal,
        expected_version: int,
    ) -> int:
        """Write a balance if the stored version still matches.

        Returns:
            int: The new version.

        Raises:
            ConcurrencyConflictError: If the version moved.
        """

    def insert_ledger_entries(self, entries: list[LedgerEntry]) -> None:
        """Append ledger entries."""

    def insert_audit_record(self, record: AuditRecord) -> None:
        """Append an audit record."""


class LedgerUnitOfWorkPort(Protocol):
    """Factory for atomic, isolated units of work."""

    def begin(self) -> AbstractContextManager[LedgerSessionPort]:
        """Open a unit of work that commits on clean exit.

        Any exception raised inside the block rolls everything back. Lock
        contention reported by the database surfaces as
        ConcurrencyConflictError.
        """


__all__ = ["LedgerSessionPort", "LedgerUnitOfWorkPort"]
