"""Infrastructure-related constants, particularly for the database."""

# PostgreSQL connection tuning
POOL_RECYCLE_SECONDS = 3600  # 1 hour
COMMAND_TIMEOUT_SECONDS = 60

# Longest SQL statement text written to slow query logs
MAX_LOGGED_STATEMENT_LENGTH = 500

# Constraint names stay stable across autogenerated migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Signed 64-bit range shared by BIGINT and SQLite INTEGER keys
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1
