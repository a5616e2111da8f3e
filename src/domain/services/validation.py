"""Domain validation helpers."""

from decimal import Decimal
from logging import Logger

from src.domain.errors import InvalidAmountError
from src.utils.decimal_utils import (
    MAX_MONEY,
    coerce_decimal,
    has_money_precision,
)


def validate_amount(raw_amount) -> Decimal:
    """Return the amount as a Decimal or raise when it cannot be moved.

    Args:
        raw_amount: Amount as provided by the caller.

    Returns:
        Decimal: Validated amount.

    Raises:
        InvalidAmountError: If the amount is not numeric, not finite, not
            positive, larger than a stored balance can hold, or has more
            than two decimal places.
    """
    try:
        amount = coerce_decimal(raw_amount)
    except ValueError as exc:
        raise InvalidAmountError(str(exc)) from exc
    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {raw_amount!r}")
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be positive: {amount}")
    if amount > MAX_MONEY:
        raise InvalidAmountError(
            f"Amount exceeds the maximum of {MAX_MONEY}: {raw_amount!r}"
        )
    if not has_money_precision(amount):
        raise InvalidAmountError(
            f"Amount has more than two decimal places: {amount}"
        )
    return amount


def validate_balance_sign(
    account_id: str,
    balance: Decimal,
    logger: Logger,
) -> bool:
    """Warn when a stored balance is negative.

    Args:
        account_id: Account identifier from the repository row.
        balance: Stored balance.
        logger: Logger used for warnings.

    Returns:
        bool: True when the balance is non-negative.
    """
    if balance < 0:
        logger.warning(
            f"Balance is negative for account_id={account_id}: {balance}"
        )
        return False
    return True


__all__ = ["validate_amount", "validate_balance_sign"]
