"""Tests for the TransferFundsUseCase."""

from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
import itertools
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.transfer_funds import TransferFundsUseCase
from src.domain.errors import (
    ConcurrencyConflictError,
    CurrencyMismatchError,
    InsufficientFundsError,
    InvalidAmountError,
    UnauthorizedAccountError,
    UnknownCategoryError,
)
from src.domain.models import Account, TransferRequest

NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def _account(account_id: str, balance: str, **overrides) -> Account:
    values = {
        "account_id": account_id,
        "user_id": "alice",
        "account_type": "CHECKING",
        "balance": Decimal(balance),
        "currency_code": "EUR",
        "version": 1,
    }
    values.update(overrides)
    return Account(**values)


class FakeUnitOfWork:
    """Unit of work yielding a MagicMock session and counting commits."""

    def __init__(self, session: MagicMock) -> None:
        self.session = session
        self.begun = 0
        self.committed = 0
        self.rolled_back = 0

    @contextmanager
    def begin(self):
        self.begun += 1
        try:
            yield self.session
        except Exception:
            self.rolled_back += 1
            raise
        self.committed += 1


def _build_session(*accounts: Account) -> MagicMock:
    session = MagicMock()
    session.lock_accounts.return_value = {
        account.account_id: account for account in accounts
    }
    session.category_exists.return_value = True
    return session


def _build_use_case(unit_of_work, **kwargs) -> TransferFundsUseCase:
    ids = (f"id-{n}" for n in itertools.count(1))
    return TransferFundsUseCase(
        unit_of_work=unit_of_work,
        logger=MagicMock(),
        audit_logger=MagicMock(),
        id_factory=lambda: next(ids),
        clock=lambda: NOW,
        sleep=MagicMock(),
        **kwargs,
    )


def _request(**overrides) -> TransferRequest:
    values = {
        "from_account_id": "acc-b",
        "to_account_id": "acc-a",
        "amount": Decimal("40.00"),
        "acting_user_id": "alice",
    }
    values.update(overrides)
    return TransferRequest(**values)


def test_execute_writes_balances_entries_and_audit_in_one_unit() -> None:
    """A valid transfer should update both balances and append three rows."""
    session = _build_session(
        _account("acc-a", "10.00", version=7),
        _account("acc-b", "100.00", version=3),
    )
    unit_of_work = FakeUnitOfWork(session)
    use_case = _build_use_case(unit_of_work)

    result = use_case.execute(_request(category_id="cat-1"))

    assert unit_of_work.begun == 1
    assert unit_of_work.committed == 1
    session.lock_accounts.assert_called_once_with(["acc-a", "acc-b"])
    session.category_exists.assert_called_once_with("cat-1", "alice")
    # Balances are written in account id order with the read versions.
    assert [c.args for c in session.update_balance.call_args_list] == [
        ("acc-a", Decimal("50.00"), 7),
        ("acc-b", Decimal("60.00"), 3),
    ]
    (entries,), _ = session.insert_ledger_entries.call_args
    debit, credit = entries
    assert debit.account_id == "acc-b"
    assert debit.amount == Decimal("-40.00")
    assert credit.account_id == "acc-a"
    assert credit.amount == Decimal("40.00")
    assert debit.created_at == credit.created_at == NOW
    session.insert_audit_record.assert_called_once()
    audit_record = session.insert_audit_record.call_args.args[0]
    assert audit_record.user_id == "alice"

    assert result.transfer_id == "id-1"
    assert result.debit_entry_id == "id-2"
    assert result.credit_entry_id == "id-3"
    assert result.audit_id == "id-4"
    assert result.source_balance == Decimal("60.00")
    assert result.destination_balance == Decimal("50.00")
    assert result.created_at == NOW


def test_execute_rejects_invalid_amount_without_opening_a_unit() -> None:
    unit_of_work = FakeUnitOfWork(_build_session())
    use_case = _build_use_case(unit_of_work)

    with pytest.raises(InvalidAmountError):
        use_case.execute(_request(amount=Decimal("0")))

    assert unit_of_work.begun == 0


def test_execute_rejects_insufficient_funds_without_writes() -> None:
    session = _build_session(
        _account("acc-a", "0.00"),
        _account("acc-b", "39.99"),
    )
    unit_of_work = FakeUnitOfWork(session)
    use_case = _build_use_case(unit_of_work)

    with pytest.raises(InsufficientFundsError):
        use_case.execute(_request())

    assert unit_of_work.rolled_back == 1
    assert unit_of_work.committed == 0
    session.update_balance.assert_not_called()
    session.insert_ledger_entries.assert_not_called()
    session.insert_audit_record.assert_not_called()


@pytest.mark.parametrize(
    "accounts",
    [
        (_account("acc-a", "0.00"),),
        (_account("acc-a", "0.00"), _account("acc-b", "90.00", user_id="bob")),
    ],
)
def test_execute_rejects_missing_or_foreign_accounts(accounts) -> None:
    session = _build_session(*accounts)
    use_case = _build_use_case(FakeUnitOfWork(session))

    with pytest.raises(UnauthorizedAccountError) as exc_info:
        use_case.execute(_request())

    assert exc_info.value.account_id == "acc-b"
    session.update_balance.assert_not_called()


def test_execute_rejects_currency_mismatch() -> None:
    session = _build_session(
        _account("acc-a", "0.00", currency_code="USD"),
        _account("acc-b", "90.00"),
    )
    use_case = _build_use_case(FakeUnitOfWork(session))

    with pytest.raises(CurrencyMismatchError):
        use_case.execute(_request())


def test_execute_rejects_unknown_category() -> None:
    session = _build_session(
        _account("acc-a", "0.00"),
        _account("acc-b", "90.00"),
    )
    session.category_exists.return_value = False
    use_case = _build_use_case(FakeUnitOfWork(session))

    with pytest.raises(UnknownCategoryError):
        use_case.execute(_request(category_id="cat-x"))

    session.update_balance.assert_not_called()


def test_execute_retries_after_conflict_then_succeeds() -> None:
    """A lost race should be retried inside a fresh unit of work."""
    session = _build_session(
        _account("acc-a", "0.00"),
        _account("acc-b", "90.00"),
    )
    session.update_balance.side_effect = [
        ConcurrencyConflictError("version moved"),
        2,
        2,
    ]
    unit_of_work = FakeUnitOfWork(session)
    use_case = _build_use_case(unit_of_work, retry_backoff_seconds=0.2)

    result = use_case.execute(_request())

    assert unit_of_work.begun == 2
    assert unit_of_work.rolled_back == 1
    assert unit_of_work.committed == 1
    use_case._sleep.assert_called_once_with(0.2)
    assert result.source_balance == Decimal("50.00")
    session.insert_audit_record.assert_called_once()


def test_execute_surfaces_conflict_after_last_attempt() -> None:
    session = _build_session(
        _account("acc-a", "0.00"),
        _account("acc-b", "90.00"),
    )
    session.update_balance.side_effect = ConcurrencyConflictError("busy")
    unit_of_work = FakeUnitOfWork(session)
    use_case = _build_use_case(unit_of_work, max_attempts=3)

    with pytest.raises(ConcurrencyConflictError):
        use_case.execute(_request())

    assert unit_of_work.begun == 3
    assert unit_of_work.committed == 0
    assert use_case._sleep.call_count == 2


def test_execute_does_not_retry_business_errors() -> None:
    session = _build_session(
        _account("acc-a", "0.00"),
        _account("acc-b", "1.00"),
    )
    unit_of_work = FakeUnitOfWork(session)
    use_case = _build_use_case(unit_of_work, max_attempts=5)

    with pytest.raises(InsufficientFundsError):
        use_case.execute(_request())

    assert unit_of_work.begun == 1
    use_case._sleep.assert_not_called()
