"""Domain models for user accounts."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Account:
    """Snapshot of an account row.

    Attributes:
        account_id: Account identifier.
        user_id: Identifier of the owning user.
        account_type: One of CHECKING, SAVINGS or CREDIT.
        balance: Current balance with two decimal places.
        currency_code: ISO currency code.
        version: Counter incremented on every balance write.
    """

    account_id: str
    user_id: str
    account_type: str
    balance: Decimal
    currency_code: str
    version: int = 0


__all__ = ["Account"]
