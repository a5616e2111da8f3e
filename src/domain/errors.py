"""Domain errors raised by the transfer processor.

Every error leaves storage untouched: the unit of work is rolled back before
the exception reaches the caller.
"""

from decimal import Decimal


class TransferError(Exception):
    """Base class for transfer failures."""


class TransferValidationError(TransferError):
    """The request is malformed or not permitted for the acting user."""


class InvalidAmountError(TransferValidationError):
    """The amount is not a positive value with at most two decimals."""


class SameAccountTransferError(TransferValidationError):
    """Source and destination accounts are the same."""


class UnauthorizedAccountError(TransferValidationError):
    """An account is missing or not owned by the acting user."""

    def __init__(self, account_id: str, user_id: str) -> None:
        super().__init__(
            f"Account {account_id} is not accessible to user {user_id}"
        )
        self.account_id = account_id
        self.user_id = user_id


class CurrencyMismatchError(TransferValidationError):
    """Source and destination accounts hold different currencies."""


class UnknownCategoryError(TransferValidationError):
    """The category does not exist for the acting user."""


class InsufficientFundsError(TransferError):
    """The source balance does not cover the amount."""

    def __init__(
        self,
        account_id: str,
        balance: Decimal,
        amount: Decimal,
    ) -> None:
        super().__init__(
            f"Insufficient funds on account {account_id}: "
            f"balance={balance}, requested={amount}"
        )
        self.account_id = account_id
        self.balance = balance
        self.amount = amount


class ConcurrencyConflictError(TransferError):
    """Another writer touched the same account; the attempt can be retried."""


__all__ = [
    "TransferError",
    "TransferValidationError",
    "InvalidAmountError",
    "SameAccountTransferError",
    "UnauthorizedAccountError",
    "CurrencyMismatchError",
    "UnknownCategoryError",
    "InsufficientFundsError",
    "ConcurrencyConflictError",
]
