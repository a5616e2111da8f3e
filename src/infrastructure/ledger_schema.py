"""DDL for the ledger tables."""

from sqlalchemy.engine import Engine

from src.domain.constants import (
    ACCOUNT_TYPES,
    ENTRY_TYPE_CREDIT,
    ENTRY_TYPE_DEBIT,
)


def _sql_in_list(values) -> str:
    return ", ".join(f"'{value}'" for value in values)


CREATE_USERS_SQL = """
CREATE TABLE IF NOT EXISTS users (
    user_id TEXT PRIMARY KEY,
    display_name TEXT
)
"""

CREATE_ACCOUNTS_SQL = f"""
CREATE TABLE IF NOT EXISTS accounts (
    account_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users (user_id),
    account_type TEXT NOT NULL
        CHECK (account_type IN ({_sql_in_list(ACCOUNT_TYPES)})),
    balance NUMERIC(18, 2) NOT NULL DEFAULT 0,
    currency_code TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 0
)
"""

CREATE_CATEGORIES_SQL = """
CREATE TABLE IF NOT EXISTS categories (
    category_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users (user_id),
    name TEXT NOT NULL,
    UNIQUE (user_id, name)
)
"""

CREATE_LEDGER_ENTRIES_SQL = f"""
CREATE TABLE IF NOT EXISTS ledger_entries (
    entry_id TEXT PRIMARY KEY,
    transfer_id TEXT NOT NULL,
    account_id TEXT NOT NULL REFERENCES accounts (account_id),
    category_id TEXT REFERENCES categories (category_id),
    amount NUMERIC(18, 2) NOT NULL,
    entry_type TEXT NOT NULL CHECK (
        entry_type IN ({_sql_in_list((ENTRY_TYPE_DEBIT, ENTRY_TYPE_CREDIT))})
    ),
    description TEXT NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL
)
"""

CREATE_AUDIT_RECORDS_SQL = """
CREATE TABLE IF NOT EXISTS audit_records (
    audit_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    action TEXT NOT NULL,
    details TEXT NOT NULL,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL
)
"""

CREATE_INDEXES_SQL = (
    "CREATE INDEX IF NOT EXISTS ix_accounts_user_id ON accounts (user_id)",
    "CREATE INDEX IF NOT EXISTS ix_ledger_entries_account_id "
    "ON ledger_entries (account_id)",
    "CREATE INDEX IF NOT EXISTS ix_ledger_entries_transfer_id "
    "ON ledger_entries (transfer_id)",
    "CREATE INDEX IF NOT EXISTS ix_audit_records_action "
    "ON audit_records (action)",
)

LEDGER_DDL = (
    CREATE_USERS_SQL,
    CREATE_ACCOUNTS_SQL,
    CREATE_CATEGORIES_SQL,
    CREATE_LEDGER_ENTRIES_SQL,
    CREATE_AUDIT_RECORDS_SQL,
    *CREATE_INDEXES_SQL,
)


def create_ledger_schema(engine: Engine) -> int:
    """Create the ledger tables and indexes if they do not exist.

    Args:
        engine: SQLAlchemy engine for the ledger database.

    Returns:
        int: Number of DDL statements executed.
    """
    with engine.begin() as conn:
        for statement in LEDGER_DDL:
            conn.exec_driver_sql(statement)
    return len(LEDGER_DDL)


__all__ = ["LEDGER_DDL", "create_ledger_schema"]
