"""Dialect-aware ``INSERT ... ON CONFLICT`` construction.

PostgreSQL runs in production and SQLite in tests; both dialects expose
the same ``on_conflict_do_update`` / ``on_conflict_do_nothing`` API.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


def insert_for(db: Session, model):
    """Return a dialect-specific ``insert()`` for ``model`` bound to ``db``'s engine."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upserts are not supported on dialect {dialect!r}")
