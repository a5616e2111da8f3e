"""Use case to check stored ledger data against transfer invariants."""

from collections import defaultdict
import json

from src.application.ports.ledger_repository import LedgerRepositoryPort
from src.domain.constants import (
    AUDIT_ACTION_TRANSFER,
    ENTRY_TYPE_CREDIT,
    ENTRY_TYPE_DEBIT,
)
from src.domain.models import LedgerEntry, LedgerVerificationResult
from src.domain.services.validation import validate_balance_sign
from src.infrastructure.logging.logger import get_app_logger


class VerifyLedgerUseCase:
    """Report transfers and balances that break ledger invariants."""

    def __init__(
        self,
        ledger_repository: LedgerRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_repository: Port providing read access to the ledger.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._ledger_repository = ledger_repository
        self._logger = logger or get_app_logger()

    def execute(self) -> LedgerVerificationResult:
        """Run every check and return the collected issues."""
        accounts = self._ledger_repository.fetch_accounts()
        entries = self._ledger_repository.fetch_ledger_entries()
        audit_records = self._ledger_repository.fetch_audit_records(
            AUDIT_ACTION_TRANSFER
        )

        issues = []
        for account in accounts:
            if not validate_balance_sign(
                account.account_id,
                account.balance,
                self._logger,
            ):
                issues.append(
                    f"Account {account.account_id} has negative balance "
                    f"{account.balance}"
                )

        by_transfer: dict[str, list[LedgerEntry]] = defaultdict(list)
        for entry in entries:
            by_transfer[entry.transfer_id].append(entry)
        for transfer_id in sorted(by_transfer):
            issues.extend(
                _check_entry_pair(transfer_id, by_transfer[transfer_id])
            )

        audit_counts: dict[str, int] = defaultdict(int)
        for record in audit_records:
            transfer_id = _audit_transfer_id(record.details)
            if transfer_id is None:
                issues.append(
                    f"Audit record {record.audit_id} has no transfer id"
                )
                continue
            audit_counts[transfer_id] += 1
        for transfer_id in sorted(set(by_transfer) | set(audit_counts)):
            count = audit_counts.get(transfer_id, 0)
            if count != 1:
                issues.append(
                    f"Transfer {transfer_id} has {count} audit records"
                )

        for issue in issues:
            self._logger.warning(issue)
        self._logger.info(
            f"Verified {len(by_transfer)} transfers across "
            f"{len(accounts)} accounts: {len(issues)} issues"
        )
        return LedgerVerificationResult(
            transfer_count=len(by_transfer),
            account_count=len(accounts),
            issues=issues,
        )


def _check_entry_pair(
    transfer_id: str,
    entries: list[LedgerEntry],
) -> list[str]:
    if len(entries) != 2:
        return [f"Transfer {transfer_id} has {len(entries)} ledger entries"]
    debits = [e for e in entries if e.entry_type == ENTRY_TYPE_DEBIT]
    credits = [e for e in entries if e.entry_type == ENTRY_TYPE_CREDIT]
    if len(debits) != 1 or len(credits) != 1:
        return [f"Transfer {transfer_id} is not one debit and one credit"]
    debit, credit = debits[0], credits[0]
    issues = []
    if debit.amount >= 0 or credit.amount <= 0:
        issues.append(f"Transfer {transfer_id} has wrongly signed amounts")
    if debit.amount + credit.amount != 0:
        issues.append(
            f"Transfer {transfer_id} does not net to zero: "
            f"{debit.amount} + {credit.amount}"
        )
    if debit.account_id == credit.account_id:
        issues.append(
            f"Transfer {transfer_id} moves funds within one account"
        )
    if debit.created_at != credit.created_at:
        issues.append(
            f"Transfer {transfer_id} entries have different timestamps"
        )
    return issues


def _audit_transfer_id(details: str) -> str | None:
    try:
        payload = json.loads(details)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    transfer_id = payload.get("transfer_id")
    return str(transfer_id) if transfer_id else None


__all__ = ["VerifyLedgerUseCase", "LedgerVerificationResult"]
