"""CLI adapter to create the ledger tables."""

from src.infrastructure.container import build_database_adapter
from src.infrastructure.ledger_schema import create_ledger_schema
from src.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Create the ledger schema in the configured database."""
    logger = get_app_logger()
    adapter = build_database_adapter()
    count = create_ledger_schema(adapter.get_ledger_engine())
    logger.info(f"Executed {count} ledger DDL statements")
    print("Ledger schema is ready.")


if __name__ == "__main__":  # pragma: no cover
    main()
