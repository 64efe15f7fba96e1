"""Utility functions for Alembic migrations."""
import sqlalchemy as sa
from alembic import op


def get_uuid_type():
    """UUID column type matching the models: native on PostgreSQL, CHAR(32) elsewhere."""
    return sa.Uuid(as_uuid=True)


def get_money_type():
    return sa.Numeric(12, 2, asdecimal=True)


def get_timestamp_default():
    """Get the appropriate server default for timestamp columns.

    Returns:
        - PostgreSQL: NOW() function
        - SQLite: CURRENT_TIMESTAMP
    """
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        return sa.text('NOW()')
    return sa.text('CURRENT_TIMESTAMP')


def active_only_where():
    """Partial index predicate selecting active rows for the current dialect."""
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        return {"postgresql_where": sa.text("active")}
    return {"sqlite_where": sa.text("active = 1")}
