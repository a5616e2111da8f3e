"""Application use cases package."""

from .transfer_funds import (
    TransferFundsUseCase,
    TransferRequest,
    TransferResult,
)
from .verify_ledger import LedgerVerificationResult, VerifyLedgerUseCase

__all__ = [
    "TransferFundsUseCase",
    "TransferRequest",
    "TransferResult",
    "VerifyLedgerUseCase",
    "LedgerVerificationResult",
]
