"""SQLAlchemy adapter running transfers inside one database transaction.

Account rows are read with ``SELECT ... FOR UPDATE`` on PostgreSQL; SQLite
engines already hold the database write lock (see ``db._create_engine``).
Balance writes additionally compare-and-swap on the ``version`` column, so
a lost race raises ConcurrencyConflictError instead of overwriting.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, bindparam, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_unit_of_work import (
    LedgerSessionPort,
    LedgerUnitOfWorkPort,
)
from src.domain.errors import ConcurrencyConflictError
from src.domain.models import Account, AuditRecord, LedgerEntry
from src.utils.decimal_utils import quantize_money

MONEY = Numeric(18, 2)
TIMESTAMP = DateTime(timezone=True)

# serialization_failure, deadlock_detected, lock_not_available
CONTENTION_SQLSTATES = frozenset({"40001", "40P01", "55P03"})

SELECT_ACCOUNTS_SQL = """
    SELECT account_id, user_id, account_type, balance, currency_code, version
    FROM accounts
    WHERE account_id IN :account_ids
    ORDER BY account_id
"""

SELECT_CATEGORY_SQL = text(
    """
    SELECT 1
    FROM categories
    WHERE category_id = :category_id AND user_id = :user_id
    """
)

UPDATE_BALANCE_SQL = text(
    """
    UPDATE accounts
    SET balance = :balance, version = version + 1
    WHERE account_id = :account_id AND version = :version
    """
).bindparams(
    bindparam("balance", type_=MONEY),
    bindparam("version", type_=Integer),
)

INSERT_LEDGER_ENTRY_SQL = text(
    """
    INSERT INTO ledger_entries (
        entry_id,
        transfer_id,
        account_id,
        category_id,
        amount,
        entry_type,
        description,
        created_at
    )
    VALUES (
        :entry_id,
        :transfer_id,
        :account_id,
        :category_id,
        :amount,
        :entry_type,
        :description,
        :created_at
    )
    """
).bindparams(
    bindparam("amount", type_=MONEY),
    bindparam("created_at", type_=TIMESTAMP),
)

INSERT_AUDIT_RECORD_SQL = text(
    """
    INSERT INTO audit_records (audit_id, user_id, action, details, created_at)
    VALUES (:audit_id, :user_id, :action, :details, :created_at)
    """
).bindparams(bindparam("created_at", type_=TIMESTAMP))


def select_accounts_statement(dialect_name: str):
    """Return the account lookup, locking rows where the dialect can."""
    sql = SELECT_ACCOUNTS_SQL
    if dialect_name != "sqlite":
        sql = f"{sql.rstrip()}\n    FOR UPDATE"
    return (
        text(sql)
        .bindparams(bindparam("account_ids", expanding=True))
        .columns(
            account_id=String,
            user_id=String,
            account_type=String,
            balance=MONEY,
            currency_code=String,
            version=Integer,
        )
    )


def is_contention_error(exc: DBAPIError) -> bool:
    """Return True when the driver error reports lock contention."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in CONTENTION_SQLSTATES:
        return True
    message = str(orig if orig is not None else exc).lower()
    return "database is locked" in message or "deadlock" in message


class SqlAlchemyLedgerSession(LedgerSessionPort):
    """LedgerSessionPort bound to one open SQLAlchemy connection."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def lock_accounts(self, account_ids: list[str]) -> dict[str, Account]:
        """Lock and return the requested accounts keyed by id."""
        if not account_ids:
            return {}
        statement = select_accounts_statement(self._conn.dialect.name)
        rows = self._conn.execute(
            statement,
            {"account_ids": sorted(set(account_ids))},
        ).all()
        return {
            row.account_id: Account(
                account_id=row.account_id,
                user_id=row.user_id,
                account_type=row.account_type,
                balance=quantize_money(row.balance),
                currency_code=row.currency_code,
                version=int(row.version),
            )
            for row in rows
        }

    def category_exists(self, category_id: str, user_id: str) -> bool:
        row = self._conn.execute(
            SELECT_CATEGORY_SQL,
            {"category_id": category_id, "user_id": user_id},
        ).first()
        return row is not None

    def update_balance(
        self,
        account_id: str,
        new_balance: Decimal,
        expected_version: int,
    ) -> int:
        """Write a balance if the stored version still matches.

        Raises:
            ConcurrencyConflictError: If no row matched the expected version.
        """
        result = self._conn.execute(
            UPDATE_BALANCE_SQL,
            {
                "account_id": account_id,
                "balance": quantize_money(new_balance),
                "version": expected_version,
            },
        )
        if result.rowcount != 1:
            raise ConcurrencyConflictError(
                f"Account {account_id} changed since version {expected_version}"
            )
        return expected_version + 1

    def insert_ledger_entries(self, entries: list[LedgerEntry]) -> None:
        if entries:
            self._conn.execute(
                INSERT_LEDGER_ENTRY_SQL,
                [asdict(entry) for entry in entries],
            )

    def insert_audit_record(self, record: AuditRecord) -> None:
        self._conn.execute(INSERT_AUDIT_RECORD_SQL, asdict(record))


class SqlAlchemyLedgerUnitOfWork(LedgerUnitOfWorkPort):
    """Unit of work backed by ``Engine.begin()``."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the unit of work.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port

    @contextmanager
    def begin(self) -> Iterator[LedgerSessionPort]:
        """Yield a session; commit on clean exit, roll back otherwise.

        Raises:
            ConcurrencyConflictError: If the database reports lock
                contention while the transaction runs or commits.
        """
        engine = self._db_port.get_ledger_engine()
        try:
            with engine.begin() as conn:
                yield SqlAlchemyLedgerSession(conn)
        except DBAPIError as exc:
            if is_contention_error(exc):
                raise ConcurrencyConflictError(str(exc.orig)) from exc
            raise


__all__ = [
    "SqlAlchemyLedgerSession",
    "SqlAlchemyLedgerUnitOfWork",
    "select_accounts_statement",
    "is_contention_error",
]
