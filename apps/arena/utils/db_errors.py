"""Classification of database errors raised by SQLAlchemy."""

from sqlalchemy.exc import IntegrityError

# SQLSTATE for unique_violation
UNIQUE_VIOLATION_CODE = "23505"


def is_unique_violation(exc: Exception) -> bool:
    """Return True if the error is a unique constraint violation.

    Works for asyncpg (sqlstate), psycopg (pgcode) and SQLite (message text).
    """
    if not isinstance(exc, IntegrityError):
        return False
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNIQUE_VIOLATION_CODE:
        return True
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message
