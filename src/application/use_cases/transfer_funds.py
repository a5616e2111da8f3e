"""Use case that moves funds between two accounts of the same user.

The use case:

* validates the request before touching storage;
* locks both accounts inside one unit of work and re-checks ownership,
  currency, category and funds against the locked rows;
* writes both balances, the debit/credit entry pair and one audit record;
* retries the whole unit when another writer wins the race on an account.
"""

from collections.abc import Callable
from datetime import datetime, timezone
import time
import uuid

from src.application.ports.ledger_unit_of_work import (
    LedgerSessionPort,
    LedgerUnitOfWorkPort,
)
from src.domain.errors import ConcurrencyConflictError, UnknownCategoryError
from src.domain.models import TransferRequest, TransferResult
from src.domain.services.transfers import (
    apply_transfer,
    build_transfer_audit_record,
    build_transfer_entries,
    ensure_account_access,
    ensure_same_currency,
    validate_transfer_request,
)
from src.infrastructure.logging.logger import get_app_logger, get_audit_logger


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TransferFundsUseCase:
    """Atomically transfer funds between two accounts."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        logger=None,
        audit_logger=None,
        max_attempts: int = 3,
        retry_backoff_seconds: float = 0.05,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Port opening atomic units of work on the ledger.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger mirroring committed transfers.
            max_attempts: Attempts made before a conflict is surfaced.
            retry_backoff_seconds: Base delay, multiplied by the attempt.
            id_factory: Callable returning fresh identifiers.
            clock: Callable returning the transfer timestamp.
            sleep: Callable used to wait between attempts.
        """
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_audit_logger()
        self._max_attempts = max(1, max_attempts)
        self._retry_backoff_seconds = max(0.0, retry_backoff_seconds)
        self._id_factory = id_factory or _new_id
        self._clock = clock or _utc_now
        self._sleep = sleep or time.sleep

    def execute(self, request: TransferRequest) -> TransferResult:
        """Run the transfer.

        Args:
            request: Transfer request from the acting user.

        Returns:
            TransferResult: Identifiers and balances of the committed
            transfer.

        Raises:
            TransferValidationError: If the request is invalid or touches an
                account the user does not own.
            InsufficientFundsError: If the source balance is too low.
            ConcurrencyConflictError: If every attempt lost a race.
        """
        validated = validate_transfer_request(request)
        for attempt in range(1, self._max_attempts + 1):
            try:
                result = self._attempt(validated)
                break
            except ConcurrencyConflictError as exc:
                if attempt == self._max_attempts:
                    self._logger.error(
                        f"Transfer {validated.from_account_id} -> "
                        f"{validated.to_account_id} gave up after "
                        f"{attempt} attempts: {exc}"
                    )
                    raise
                self._logger.warning(
                    f"Transfer attempt {attempt} hit contention, retrying: {exc}"
                )
                self._sleep(self._retry_backoff_seconds * attempt)

        self._logger.info(
            f"Transferred {validated.amount} from {validated.from_account_id} "
            f"to {validated.to_account_id} (transfer_id={result.transfer_id})"
        )
        self._audit_logger.info(
            f"user={validated.acting_user_id} action=TRANSFER "
            f"transfer_id={result.transfer_id} audit_id={result.audit_id}"
        )
        return result

    def _attempt(self, request: TransferRequest) -> TransferResult:
        with self._unit_of_work.begin() as session:
            return self._transfer(session, request)

    def _transfer(
        self,
        session: LedgerSessionPort,
        request: TransferRequest,
    ) -> TransferResult:
        user_id = request.acting_user_id
        accounts = session.lock_accounts(
            sorted([request.from_account_id, request.to_account_id])
        )
        source = ensure_account_access(
            accounts.get(request.from_account_id),
            request.from_account_id,
            user_id,
        )
        destination = ensure_account_access(
            accounts.get(request.to_account_id),
            request.to_account_id,
            user_id,
        )
        currency_code = ensure_same_currency(source, destination)
        if request.category_id and not session.category_exists(
            request.category_id,
            user_id,
        ):
            raise UnknownCategoryError(
                f"Category {request.category_id} does not exist for "
                f"user {user_id}"
            )
        debited, credited = apply_transfer(
            source,
            destination,
            request.amount,
        )

        for before, after in sorted(
            ((source, debited), (destination, credited)),
            key=lambda pair: pair[0].account_id,
        ):
            session.update_balance(
                after.account_id,
                after.balance,
                before.version,
            )

        created_at = self._clock()
        transfer_id = self._id_factory()
        debit, credit = build_transfer_entries(
            transfer_id=transfer_id,
            source=source,
            destination=destination,
            amount=request.amount,
            created_at=created_at,
            id_factory=self._id_factory,
            category_id=request.category_id,
            description=request.description,
        )
        session.insert_ledger_entries([debit, credit])
        audit_record = build_transfer_audit_record(
            audit_id=self._id_factory(),
            user_id=user_id,
            debit=debit,
            credit=credit,
            currency_code=currency_code,
        )
        session.insert_audit_record(audit_record)

        return TransferResult(
            transfer_id=transfer_id,
            debit_entry_id=debit.entry_id,
            credit_entry_id=credit.entry_id,
            audit_id=audit_record.audit_id,
            source_balance=debited.balance,
            destination_balance=credited.balance,
            created_at=created_at,
        )


__all__ = ["TransferFundsUseCase", "TransferRequest", "TransferResult"]
