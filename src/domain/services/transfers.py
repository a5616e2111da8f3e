"""Domain rules for moving funds between two accounts."""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
import json

from src.domain.constants import (
    AUDIT_ACTION_TRANSFER,
    ENTRY_TYPE_CREDIT,
    ENTRY_TYPE_DEBIT,
)
from src.domain.errors import (
    CurrencyMismatchError,
    InsufficientFundsError,
    InvalidAmountError,
    SameAccountTransferError,
    TransferValidationError,
    UnauthorizedAccountError,
)
from src.domain.models import (
    Account,
    AuditRecord,
    LedgerEntry,
    TransferRequest,
)
from src.domain.services.normalization import (
    normalize_currency_code,
    normalize_description,
    normalize_identifier,
)
from src.domain.services.validation import validate_amount
from src.utils.decimal_utils import MAX_MONEY


def validate_transfer_request(request: TransferRequest) -> TransferRequest:
    """Check a request before any storage access.

    Args:
        request: Raw transfer request.

    Returns:
        TransferRequest: Request with normalized identifiers, amount and
        description.

    Raises:
        TransferValidationError: If an identifier is blank or both accounts
            are the same.
        InvalidAmountError: If the amount cannot be transferred.
    """
    from_account_id = normalize_identifier(request.from_account_id)
    to_account_id = normalize_identifier(request.to_account_id)
    acting_user_id = normalize_identifier(request.acting_user_id)
    if not acting_user_id:
        raise TransferValidationError("Acting user is required")
    if not from_account_id or not to_account_id:
        raise TransferValidationError(
            "Source and destination accounts are required"
        )
    if from_account_id == to_account_id:
        raise SameAccountTransferError(
            f"Cannot transfer from account {from_account_id} to itself"
        )
    amount = validate_amount(request.amount)
    return TransferRequest(
        from_account_id=from_account_id,
        to_account_id=to_account_id,
        amount=amount,
        acting_user_id=acting_user_id,
        category_id=normalize_identifier(request.category_id),
        description=normalize_description(request.description),
    )


def ensure_account_access(
    account: Account | None,
    account_id: str,
    user_id: str,
) -> Account:
    """Return the account when the user owns it.

    A missing account is reported like a foreign one so callers cannot probe
    for other users' account ids.
    """
    if account is None or account.user_id != user_id:
        raise UnauthorizedAccountError(account_id, user_id)
    return account


def ensure_same_currency(source: Account, destination: Account) -> str:
    """Return the shared currency code of both accounts."""
    source_currency = normalize_currency_code(source.currency_code)
    destination_currency = normalize_currency_code(destination.currency_code)
    if source_currency != destination_currency:
        raise CurrencyMismatchError(
            f"Currency mismatch: {source.account_id} holds {source_currency}, "
            f"{destination.account_id} holds {destination_currency}"
        )
    return source_currency or ""


def ensure_sufficient_funds(source: Account, amount: Decimal) -> None:
    """Raise when the source balance cannot cover the amount."""
    if source.balance < amount:
        raise InsufficientFundsError(
            source.account_id,
            source.balance,
            amount,
        )


def apply_transfer(
    source: Account,
    destination: Account,
    amount: Decimal,
) -> tuple[Account, Account]:
    """Return account snapshots with the transfer applied.

    Versions are left untouched; the repository bumps them when it writes.
    """
    ensure_sufficient_funds(source, amount)
    credited_balance = destination.balance + amount
    if credited_balance > MAX_MONEY:
        raise InvalidAmountError(
            f"Crediting {amount} would take account "
            f"{destination.account_id} past the maximum balance {MAX_MONEY}"
        )
    return (
        replace(source, balance=source.balance - amount),
        replace(destination, balance=credited_balance),
    )


def build_transfer_entries(
    *,
    transfer_id: str,
    source: Account,
    destination: Account,
    amount: Decimal,
    created_at: datetime,
    id_factory: Callable[[], str],
    category_id: str | None = None,
    description: str | None = None,
) -> tuple[LedgerEntry, LedgerEntry]:
    """Build the debit and credit entries of a transfer.

    Args:
        transfer_id: Identifier shared by both entries.
        source: Account being debited.
        destination: Account being credited.
        amount: Positive amount moved.
        created_at: Timestamp shared by both entries.
        id_factory: Callable returning fresh entry identifiers.
        category_id: Optional category attached to both entries.
        description: Optional description; a default naming the other
            account is used when missing.

    Returns:
        tuple[LedgerEntry, LedgerEntry]: Debit entry, then credit entry.
    """
    debit = LedgerEntry(
        entry_id=id_factory(),
        transfer_id=transfer_id,
        account_id=source.account_id,
        amount=-amount,
        entry_type=ENTRY_TYPE_DEBIT,
        description=description or f"Transfer to {destination.account_id}",
        created_at=created_at,
        category_id=category_id,
    )
    credit = LedgerEntry(
        entry_id=id_factory(),
        transfer_id=transfer_id,
        account_id=destination.account_id,
        amount=amount,
        entry_type=ENTRY_TYPE_CREDIT,
        description=description or f"Transfer from {source.account_id}",
        created_at=created_at,
        category_id=category_id,
    )
    return debit, credit


def build_transfer_audit_record(
    *,
    audit_id: str,
    user_id: str,
    debit: LedgerEntry,
    credit: LedgerEntry,
    currency_code: str,
) -> AuditRecord:
    """Build the audit record describing a transfer."""
    details = {
        "transfer_id": debit.transfer_id,
        "from_account_id": debit.account_id,
        "to_account_id": credit.account_id,
        "amount": str(credit.amount),
        "currency_code": currency_code,
        "debit_entry_id": debit.entry_id,
        "credit_entry_id": credit.entry_id,
    }
    if credit.category_id:
        details["category_id"] = credit.category_id
    return AuditRecord(
        audit_id=audit_id,
        user_id=user_id,
        action=AUDIT_ACTION_TRANSFER,
        details=json.dumps(details, sort_keys=True),
        created_at=debit.created_at,
    )


__all__ = [
    "validate_transfer_request",
    "ensure_account_access",
    "ensure_same_currency",
    "ensure_sufficient_funds",
    "apply_transfer",
    "build_transfer_entries",
    "build_transfer_audit_record",
]
