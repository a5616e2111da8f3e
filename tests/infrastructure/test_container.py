"""Tests for the composition root."""

from unittest.mock import MagicMock

from src.infrastructure import container
from src.infrastructure.ledger_repository import SqlAlchemyLedgerRepository
from src.infrastructure.ledger_unit_of_work import SqlAlchemyLedgerUnitOfWork
from src.infrastructure.settings import TransferSettings


def test_build_transfer_use_case_applies_settings(monkeypatch):
    monkeypatch.setattr(container, "get_app_logger", MagicMock)
    db_port = MagicMock()

    use_case = container.build_transfer_use_case(
        db_port=db_port,
        settings=TransferSettings(max_attempts=6, retry_backoff_seconds=0.3),
    )

    assert isinstance(use_case._unit_of_work, SqlAlchemyLedgerUnitOfWork)
    assert use_case._unit_of_work._db_port is db_port
    assert use_case._max_attempts == 6
    assert use_case._retry_backoff_seconds == 0.3


def test_build_ledger_repository_uses_given_port():
    db_port = MagicMock()

    repository = container.build_ledger_repository(db_port)

    assert isinstance(repository, SqlAlchemyLedgerRepository)
    assert repository._db_port is db_port
