"""Composition root for wiring infrastructure adapters."""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.application.ports.ledger_unit_of_work import LedgerUnitOfWorkPort
from src.application.use_cases.transfer_funds import TransferFundsUseCase
from src.application.use_cases.verify_ledger import VerifyLedgerUseCase
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.ledger_repository import SqlAlchemyLedgerRepository
from src.infrastructure.ledger_unit_of_work import SqlAlchemyLedgerUnitOfWork
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import TransferSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_ledger_unit_of_work(
    db_port: DatabaseEnginePort | None = None,
) -> LedgerUnitOfWorkPort:
    """Return the transactional ledger adapter."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyLedgerUnitOfWork(resolved_db)


def build_ledger_repository(
    db_port: DatabaseEnginePort | None = None,
) -> LedgerRepositoryPort:
    """Return the read-only ledger repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyLedgerRepository(resolved_db)


def build_transfer_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: TransferSettings | None = None,
) -> TransferFundsUseCase:
    """Return the transfer use case configured from the environment."""
    resolved_settings = settings or TransferSettings.from_env()
    return TransferFundsUseCase(
        unit_of_work=build_ledger_unit_of_work(db_port),
        logger=get_app_logger(),
        max_attempts=resolved_settings.max_attempts,
        retry_backoff_seconds=resolved_settings.retry_backoff_seconds,
    )


def build_verify_ledger_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> VerifyLedgerUseCase:
    """Return the ledger verification use case."""
    return VerifyLedgerUseCase(
        ledger_repository=build_ledger_repository(db_port),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_ledger_unit_of_work",
    "build_ledger_repository",
    "build_transfer_use_case",
    "build_verify_ledger_use_case",
]
