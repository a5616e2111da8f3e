"""Integration tests running transfers against a SQLite ledger."""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError

from src.application.use_cases.transfer_funds import TransferFundsUseCase
from src.application.use_cases.verify_ledger import VerifyLedgerUseCase
from src.domain.errors import (
    ConcurrencyConflictError,
    InsufficientFundsError,
    UnauthorizedAccountError,
    UnknownCategoryError,
)
from src.domain.models import TransferRequest
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter, _create_engine
from src.infrastructure.ledger_repository import SqlAlchemyLedgerRepository
from src.infrastructure.ledger_schema import create_ledger_schema
from src.infrastructure.ledger_unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    is_contention_error,
    select_accounts_statement,
)


@pytest.fixture
def db_port(tmp_path):
    engine = _create_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    create_ledger_schema(engine)
    with engine.begin() as conn:
        conn.execute(
            text("INSERT INTO users (user_id, display_name) VALUES (:u, :n)"),
            [{"u": "alice", "n": "Alice"}, {"u": "bob", "n": "Bob"}],
        )
        conn.execute(
            text(
                "INSERT INTO accounts "
                "(account_id, user_id, account_type, balance, currency_code) "
                "VALUES (:a, :u, :t, :b, :c)"
            ),
            [
                {"a": "chk", "u": "alice", "t": "CHECKING", "b": "100.00", "c": "EUR"},
                {"a": "sav", "u": "alice", "t": "SAVINGS", "b": "25.50", "c": "EUR"},
                {"a": "bob-chk", "u": "bob", "t": "CHECKING", "b": "70.00", "c": "EUR"},
            ],
        )
        conn.execute(
            text(
                "INSERT INTO categories (category_id, user_id, name) "
                "VALUES ('rent', 'alice', 'Rent')"
            )
        )
    yield SqlAlchemyDatabaseEngineAdapter(engine)
    engine.dispose()


def _use_case(db_port, **kwargs) -> TransferFundsUseCase:
    return TransferFundsUseCase(
        unit_of_work=SqlAlchemyLedgerUnitOfWork(db_port),
        logger=MagicMock(),
        audit_logger=MagicMock(),
        **kwargs,
    )


def _balances(db_port) -> dict[str, Decimal]:
    repository = SqlAlchemyLedgerRepository(db_port)
    return {
        account.account_id: account.balance
        for account in repository.fetch_accounts()
    }


def _count(db_port, table: str) -> int:
    with db_port.get_ledger_engine().connect() as conn:
        return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()


def test_transfer_moves_funds_and_records_entries(db_port) -> None:
    before = _balances(db_port)

    result = _use_case(db_port).execute(
        TransferRequest(
            from_account_id="chk",
            to_account_id="sav",
            amount=Decimal("30.25"),
            acting_user_id="alice",
            category_id="rent",
            description="Monthly savings",
        )
    )

    after = _balances(db_port)
    assert after["chk"] == before["chk"] - Decimal("30.25")
    assert after["sav"] == before["sav"] + Decimal("30.25")
    assert sum(after.values()) == sum(before.values())
    assert result.source_balance == Decimal("69.75")
    assert result.destination_balance == Decimal("55.75")

    entries = SqlAlchemyLedgerRepository(db_port).fetch_ledger_entries()
    assert [(e.entry_id, e.entry_type, e.amount) for e in entries] == [
        (result.debit_entry_id, "DEBIT", Decimal("-30.25")),
        (result.credit_entry_id, "CREDIT", Decimal("30.25")),
    ]
    assert entries[0].created_at == entries[1].created_at
    assert {e.category_id for e in entries} == {"rent"}
    assert _count(db_port, "audit_records") == 1

    accounts = SqlAlchemyLedgerRepository(db_port).fetch_accounts()
    assert {a.account_id: a.version for a in accounts} == {
        "bob-chk": 0,
        "chk": 1,
        "sav": 1,
    }


def test_rejected_transfers_leave_no_trace(db_port) -> None:
    before = _balances(db_port)
    use_case = _use_case(db_port)

    with pytest.raises(InsufficientFundsError):
        use_case.execute(
            TransferRequest("sav", "chk", Decimal("25.51"), "alice")
        )
    with pytest.raises(UnauthorizedAccountError):
        use_case.execute(
            TransferRequest("chk", "bob-chk", Decimal("1.00"), "alice")
        )
    with pytest.raises(UnauthorizedAccountError):
        use_case.execute(
            TransferRequest("chk", "missing", Decimal("1.00"), "alice")
        )
    with pytest.raises(UnknownCategoryError):
        use_case.execute(
            TransferRequest("chk", "sav", Decimal("1.00"), "alice", "groceries")
        )

    assert _balances(db_port) == before
    assert _count(db_port, "ledger_entries") == 0
    assert _count(db_port, "audit_records") == 0


def test_stale_version_raises_conflict_and_rolls_back(db_port) -> None:
    unit_of_work = SqlAlchemyLedgerUnitOfWork(db_port)

    with pytest.raises(ConcurrencyConflictError):
        with unit_of_work.begin() as session:
            accounts = session.lock_accounts(["chk"])
            session.update_balance("chk", Decimal("1.00"), accounts["chk"].version)
            session.update_balance("chk", Decimal("2.00"), accounts["chk"].version)

    assert _balances(db_port)["chk"] == Decimal("100.00")


def test_concurrent_debits_never_overdraw(db_port) -> None:
    """Ten racing 20.00 debits against 100.00 should leave exactly 0.00."""
    use_case = _use_case(db_port, max_attempts=10, retry_backoff_seconds=0.01)

    def _debit(_):
        try:
            use_case.execute(
                TransferRequest("chk", "sav", Decimal("20.00"), "alice")
            )
        except InsufficientFundsError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=5) as pool:
        outcomes = list(pool.map(_debit, range(10)))

    balances = _balances(db_port)
    assert outcomes.count(True) == 5
    assert balances["chk"] == Decimal("0.00")
    assert balances["sav"] == Decimal("125.50")
    assert _count(db_port, "ledger_entries") == 10
    assert _count(db_port, "audit_records") == 5

    result = VerifyLedgerUseCase(
        SqlAlchemyLedgerRepository(db_port),
        logger=MagicMock(),
    ).execute()
    assert result.is_consistent
    assert result.transfer_count == 5


def test_schema_rejects_unknown_account_types(db_port) -> None:
    insert = text(
        "INSERT INTO accounts "
        "(account_id, user_id, account_type, balance, currency_code) "
        "VALUES ('brk', 'alice', 'BROKERAGE', 0, 'EUR')"
    )

    with pytest.raises(IntegrityError):
        with db_port.get_ledger_engine().begin() as conn:
            conn.execute(insert)

    assert _count(db_port, "accounts") == 3


def test_select_accounts_locks_rows_outside_sqlite() -> None:
    assert "FOR UPDATE" in str(select_accounts_statement("postgresql"))
    assert "FOR UPDATE" not in str(select_accounts_statement("sqlite"))


def test_is_contention_error_recognizes_lock_failures() -> None:
    locked = OperationalError("UPDATE", {}, Exception("database is locked"))
    serialization = OperationalError("UPDATE", {}, Exception("conflict"))
    serialization.orig.sqlstate = "40001"
    unrelated = OperationalError("UPDATE", {}, Exception("disk I/O error"))

    assert is_contention_error(locked)
    assert is_contention_error(serialization)
    assert not is_contention_error(unrelated)
