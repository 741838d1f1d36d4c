from __future__ import annotations

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection

# Columns added to the trades table after the first journal release.
LATE_TRADE_COLUMNS = {
    "lot_size": "NUMERIC(18, 4)",
    "post_analysis": "TEXT",
}


def apply_schema_migrations(connection: Connection) -> None:
    """
    Apply lightweight schema migrations that are safe to run on every startup.
    Databases created before trade review and lot sizes existed get the
    missing trades columns added in place.
    """
    inspector = inspect(connection)
    columns = {column["name"] for column in inspector.get_columns("trades")}
    for name, column_type in LATE_TRADE_COLUMNS.items():
        if name not in columns:
            connection.execute(text(f"ALTER TABLE trades ADD COLUMN {name} {column_type}"))
