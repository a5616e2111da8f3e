"""SQLAlchemy-backed repository for reading ledger data."""

from sqlalchemy import DateTime, Integer, Numeric, String, text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.models import Account, AuditRecord, LedgerEntry
from src.infrastructure.db import connect_read_only
from src.utils.decimal_utils import quantize_money

SELECT_ALL_ACCOUNTS_SQL = text(
    """
    SELECT account_id, user_id, account_type, balance, currency_code, version
    FROM accounts
    ORDER BY account_id
    """
).columns(
    account_id=String,
    user_id=String,
    account_type=String,
    balance=Numeric(18, 2),
    currency_code=String,
    version=Integer,
)

SELECT_LEDGER_ENTRIES_SQL = text(
    """
    SELECT entry_id, transfer_id, account_id, category_id, amount,
           entry_type, description, created_at
    FROM ledger_entries
    ORDER BY created_at, transfer_id, entry_type DESC
    """
).columns(
    entry_id=String,
    transfer_id=String,
    account_id=String,
    category_id=String,
    amount=Numeric(18, 2),
    entry_type=String,
    description=String,
    created_at=DateTime(timezone=True),
)

SELECT_AUDIT_RECORDS_SQL = text(
    """
    SELECT audit_id, user_id, action, details, created_at
    FROM audit_records
    WHERE action = :action
    ORDER BY created_at, audit_id
    """
).columns(
    audit_id=String,
    user_id=String,
    action=String,
    details=String,
    created_at=DateTime(timezone=True),
)


class SqlAlchemyLedgerRepository(LedgerRepositoryPort):
    """Repository backed by SQLAlchemy for ledger reads."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port

    def fetch_accounts(self) -> list[Account]:
        """Return every account ordered by id."""
        engine = self._db_port.get_ledger_engine()
        with connect_read_only(engine) as conn:
            rows = conn.execute(SELECT_ALL_ACCOUNTS_SQL).all()
        return [
            Account(
                account_id=row.account_id,
                user_id=row.user_id,
                account_type=row.account_type,
                balance=quantize_money(row.balance),
                currency_code=row.currency_code,
                version=int(row.version),
            )
            for row in rows
        ]

    def fetch_ledger_entries(self) -> list[LedgerEntry]:
        """Return every ledger entry, debit before credit per transfer."""
        engine = self._db_port.get_ledger_engine()
        with connect_read_only(engine) as conn:
            rows = conn.execute(SELECT_LEDGER_ENTRIES_SQL).all()
        return [
            LedgerEntry(
                entry_id=row.entry_id,
                transfer_id=row.transfer_id,
                account_id=row.account_id,
                amount=quantize_money(row.amount),
                entry_type=row.entry_type,
                description=row.description,
                created_at=row.created_at,
                category_id=row.category_id,
            )
            for row in rows
        ]

    def fetch_audit_records(self, action: str) -> list[AuditRecord]:
        """Return audit records for the given action."""
        engine = self._db_port.get_ledger_engine()
        with connect_read_only(engine) as conn:
            rows = conn.execute(
                SELECT_AUDIT_RECORDS_SQL,
                {"action": action},
            ).all()
        return [
            AuditRecord(
                audit_id=row.audit_id,
                user_id=row.user_id,
                action=row.action,
                details=row.details,
                created_at=row.created_at,
            )
            for row in rows
        ]


__all__ = ["SqlAlchemyLedgerRepository"]
