"""CLI adapter to check the ledger for broken transfer invariants."""

from src.infrastructure.container import build_verify_ledger_use_case


def main() -> int:
    """Run the verification and print a summary.

    Returns:
        int: 0 when the ledger is consistent, 1 otherwise.
    """
    use_case = build_verify_ledger_use_case()
    result = use_case.execute()
    print(
        f"Checked {result.transfer_count} transfers and "
        f"{result.account_count} accounts: {len(result.issues)} issues."
    )
    for issue in result.issues:
        print(f"- {issue}")
    return 0 if result.is_consistent else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
