# logit/errors.py
"""
Domain errors and the persistence failure classification.

Routers raise these; handlers in ``logit.main`` turn them into
``{"error": message}`` responses with the matching status code.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
    SQLAlchemyError,
)

log = logging.getLogger("uvicorn")


class LogitError(Exception):
    status_code = 500
    retryable = False
    default_message = "Unexpected error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class WorkoutValidationError(LogitError):
    """Client-correctable input problem. Shown verbatim, never retried."""
    status_code = 400
    default_message = "Invalid request body."


class ConflictError(LogitError):
    status_code = 409
    default_message = "Duplicate set or exercise order detected. Refresh and try again."


class UnavailableError(LogitError):
    status_code = 503
    retryable = True
    default_message = "Storage is temporarily unavailable. Try again later."


class SchemaMismatchError(UnavailableError):
    default_message = "Database schema mismatch. Apply migrations and retry."


class NotFoundError(LogitError):
    status_code = 404
    default_message = "Not found."


# Fragments drivers use when a table/column is missing
_SCHEMA_MARKERS = ("no such table", "no such column", "does not exist", "undefinedtable", "undefinedcolumn")


def classify_db_error(exc: SQLAlchemyError, *, fallback: str = "Unable to save workout.") -> LogitError:
    """Map a SQLAlchemy failure onto the retryable-vs-fatal taxonomy."""
    if isinstance(exc, IntegrityError):
        return ConflictError()
    if isinstance(exc, ProgrammingError):
        return SchemaMismatchError()
    if isinstance(exc, OperationalError):
        text = str(exc).lower()
        if any(marker in text for marker in _SCHEMA_MARKERS):
            return SchemaMismatchError()
        return UnavailableError()
    if isinstance(exc, (InterfaceError, DisconnectionError)):
        return UnavailableError()
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return UnavailableError()
    return LogitError(fallback)


@contextmanager
def translate_db_errors(fallback: str):
    """Log the driver detail server-side and re-raise as a domain error."""
    try:
        yield
    except SQLAlchemyError as exc:
        error = classify_db_error(exc, fallback=fallback)
        log.error("persistence failure (%s): %s", type(error).__name__, exc)
        raise error from exc
