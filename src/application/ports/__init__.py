"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_repository import LedgerRepositoryPort
from .ledger_unit_of_work import LedgerSessionPort, LedgerUnitOfWorkPort

__all__ = [
    "DatabaseEnginePort",
    "LedgerRepositoryPort",
    "LedgerSessionPort",
    "LedgerUnitOfWorkPort",
]
