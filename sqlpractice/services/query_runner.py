from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict, dataclass
from typing import Any, Optional

import psycopg

from config.settings import get_settings
from databases import DatabaseConfigurationError, reference_connection, resolve_database_id

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Query executed successfully"
EMPTY_RESULT_MESSAGE = "Query executed successfully, but returned no results"
MISSING_QUERY_MESSAGE = "SQL query is required"

# sqlite3.Warning is raised for multi-statement input on older interpreters.
# ValueError covers unencodable text, NUL characters and malformed settings.
_EXECUTION_ERRORS = (
    sqlite3.Error,
    sqlite3.Warning,
    psycopg.Error,
    DatabaseConfigurationError,
    ValueError,
)


@dataclass(frozen=True)
class ErrorInfo:
    """Driver error details, preserved verbatim for display to the student."""

    message: str
    code: Optional[str] = None
    state: Optional[str] = None
    number: Optional[int] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        if isinstance(exc, psycopg.Error):
            message = exc.diag.message_primary or str(exc)
            return cls(message=message.strip(), code=type(exc).__name__, state=exc.sqlstate)
        if isinstance(exc, sqlite3.Error):
            return cls(
                message=str(exc),
                code=getattr(exc, "sqlite_errorname", None),
                number=getattr(exc, "sqlite_errorcode", None),
            )
        return cls(message=str(exc) or type(exc).__name__, code=type(exc).__name__)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of running one query.

    ``columns`` follow SELECT order as reported by the driver's cursor
    description and are empty whenever no rows came back. Each row is a dict
    keyed by column name.
    """

    success: bool
    row_count: int = 0
    columns: tuple[str, ...] = ()
    rows: tuple[dict[str, Any], ...] = ()
    message: str = ""
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "success": self.success,
            "message": self.message,
            "row_count": self.row_count,
            "columns": list(self.columns),
            "data": [dict(row) for row in self.rows],
            "error": self.error.to_dict() if self.error else None,
        }


def failed_result(error: ErrorInfo) -> QueryResult:
    return QueryResult(success=False, message=error.message, error=error)


def execute(sql_text: str, database_id: Optional[str] = None) -> QueryResult:
    """
    Run ``sql_text`` as-is against the reference database ``database_id``.

    Unknown database ids fall back to the default database. Driver,
    connection and configuration errors, and text the driver cannot encode,
    are returned as a failed ``QueryResult``; this function does not raise
    for them.

    Args:
        sql_text: Student or reference SQL, passed to the driver unchanged.
        database_id: "ClassicModels", "Northwind", or anything else for the default.
    """
    if not sql_text or not sql_text.strip():
        return failed_result(ErrorInfo(message=MISSING_QUERY_MESSAGE))

    resolved = database_id
    try:
        resolved = resolve_database_id(database_id)
        settings = get_settings()
        with reference_connection(resolved) as conn:
            cur = conn.cursor()
            try:
                cur.execute(sql_text)
                description = cur.description
                fetched = cur.fetchall() if description else []
                if not settings.QUERY_ROLLBACK_ENABLED:
                    conn.commit()
            finally:
                cur.close()
                # discards any data changes made by the statement
                conn.rollback()
    except _EXECUTION_ERRORS as exc:
        logger.info("Query against %s failed: %s", resolved, exc)
        return failed_result(ErrorInfo.from_exception(exc))

    if not fetched:
        return QueryResult(success=True, message=EMPTY_RESULT_MESSAGE)

    columns = tuple(str(column[0]) for column in description)
    rows = tuple(dict(zip(columns, row)) for row in fetched)
    return QueryResult(
        success=True,
        row_count=len(rows),
        columns=columns,
        rows=rows,
        message=SUCCESS_MESSAGE,
    )
