"""CLI adapter to run a single fund transfer.

Exit codes: 0 on success, 2 for a rejected request, 3 for insufficient
funds, 4 when contention persisted through every retry.
"""

import argparse

from src.domain.errors import (
    ConcurrencyConflictError,
    InsufficientFundsError,
    TransferValidationError,
)
from src.domain.models import TransferRequest
from src.infrastructure.container import build_transfer_use_case
from src.infrastructure.logging.logger import get_app_logger

EXIT_OK = 0
EXIT_VALIDATION = 2
EXIT_INSUFFICIENT_FUNDS = 3
EXIT_CONTENTION = 4


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Transfer funds between two accounts of one user.",
    )
    parser.add_argument("--from", dest="from_account_id", required=True)
    parser.add_argument("--to", dest="to_account_id", required=True)
    parser.add_argument("--amount", required=True)
    parser.add_argument("--user", dest="acting_user_id", required=True)
    parser.add_argument("--category", dest="category_id")
    parser.add_argument("--description")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the transfer and print the entry ids.

    Args:
        argv: Optional argument list; defaults to ``sys.argv[1:]``.

    Returns:
        int: Process exit code.
    """
    args = _build_parser().parse_args(argv)
    logger = get_app_logger()
    use_case = build_transfer_use_case()
    request = TransferRequest(
        from_account_id=args.from_account_id,
        to_account_id=args.to_account_id,
        amount=args.amount,
        acting_user_id=args.acting_user_id,
        category_id=args.category_id,
        description=args.description,
    )
    try:
        result = use_case.execute(request)
    except TransferValidationError as exc:
        logger.warning(f"Transfer rejected: {exc}")
        return EXIT_VALIDATION
    except InsufficientFundsError as exc:
        logger.warning(f"Transfer rejected: {exc}")
        return EXIT_INSUFFICIENT_FUNDS
    except ConcurrencyConflictError as exc:
        logger.error(f"Transfer failed under contention: {exc}")
        return EXIT_CONTENTION

    print(
        f"Transfer {result.transfer_id} committed: "
        f"debit={result.debit_entry_id}, credit={result.credit_entry_id}, "
        f"source_balance={result.source_balance}, "
        f"destination_balance={result.destination_balance}"
    )
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
