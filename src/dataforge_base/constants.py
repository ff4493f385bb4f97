"""
Centralized constants for DataForge Base.

Eliminates magic numbers scattered across the codebase.
Import from here instead of hardcoding values.
"""

# ===========================================================================
# Timeouts (seconds)
# ===========================================================================
CONNECTION_TIMEOUT_S = 5        # Driver connect timeout
LIVENESS_PROBE_TIMEOUT_S = 5    # Connection.is_valid() timeout
LIVENESS_TTL_S = 2.5            # How long a liveness answer is trusted

# ===========================================================================
# Query / Data limits
# ===========================================================================
DEFAULT_SELECT_LIMIT = 100      # "SELECT ... LIMIT 100" default
NO_LIMIT = -1                   # Any negative limit omits the LIMIT clause

# ===========================================================================
# Servers
# ===========================================================================
MYSQL_DEFAULT_PORT = 3306
MYSQL_DEFAULT_CHARSET = "utf8mb4"
DEFAULT_HOST = "localhost"

# ===========================================================================
# Foreign keys
# ===========================================================================
FOREIGN_KEY_PREFIX = "fk"


def foreign_key_name(table_name: str, foreign_table_name: str, column_name: str) -> str:
    """
    Build the constraint name for a foreign key column.

    Args:
        table_name: Table that owns the referencing column
        foreign_table_name: Referenced table
        column_name: Referencing column

    Returns:
        e.g. fk_orders_customers_customer_id
    """
    return f"{FOREIGN_KEY_PREFIX}_{table_name}_{foreign_table_name}_{column_name}"
