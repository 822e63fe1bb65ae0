"""Connection provider for the reference databases students practice against."""

from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
from typing import Iterator, Optional
from urllib.parse import urlparse

import psycopg

from config.settings import get_settings

logger = logging.getLogger(__name__)

CLASSIC_MODELS = "ClassicModels"
NORTHWIND = "Northwind"
KNOWN_DATABASES = (CLASSIC_MODELS, NORTHWIND)


class DatabaseConfigurationError(RuntimeError):
    """Raised when a reference database URL cannot be used."""


def resolve_database_id(database_id: Optional[str]) -> str:
    """
    Return the canonical identifier for a reference database.

    Identifiers match case-insensitively. Anything unknown, including an empty
    value, falls back to the configured default database rather than failing.
    """
    lookup = {name.lower(): name for name in KNOWN_DATABASES}
    if database_id:
        match = lookup.get(str(database_id).strip().lower())
        if match is not None:
            return match

    settings = get_settings()
    default = lookup.get(settings.DEFAULT_REFERENCE_DATABASE.strip().lower(), CLASSIC_MODELS)
    if database_id:
        logger.debug("Unknown reference database %r, using %s", database_id, default)
    return default


def database_url_for(database_id: Optional[str]) -> str:
    """Return the connection URL configured for the given database id."""
    settings = get_settings()
    urls = {
        CLASSIC_MODELS: settings.CLASSICMODELS_DATABASE_URL,
        NORTHWIND: settings.NORTHWIND_DATABASE_URL,
    }
    return urls[resolve_database_id(database_id)]


def backend_for_url(database_url: str) -> str:
    """Return "sqlite" or "postgres" for a connection URL."""
    scheme = urlparse(database_url).scheme.lower()
    if scheme.startswith("sqlite"):
        return "sqlite"
    if scheme in {"postgres", "postgresql"} or scheme.startswith("postgresql+"):
        return "postgres"
    raise DatabaseConfigurationError(f"Unsupported database URL scheme: {scheme or '(none)'}")


def masked_url(database_url: str) -> str:
    """Hide credentials so a URL can be logged."""
    if "@" not in database_url:
        return database_url
    scheme, _, rest = database_url.partition("://")
    return f"{scheme}://***@{rest.split('@')[-1]}"


def sqlite_path(database_url: str) -> str:
    """Return the file path (or ":memory:") named by a sqlite URL."""
    parsed = urlparse(database_url)
    path = parsed.path or ""
    if path.startswith("/"):
        path = path[1:]
    if path in {"", ":memory:"}:
        return ":memory:"
    if parsed.netloc:
        path = os.path.join(parsed.netloc, path)
    return path


def connect(database_url: str):
    """Open a new connection to the database behind ``database_url``."""
    settings = get_settings()
    timeout = settings.QUERY_TIMEOUT_SECONDS

    if backend_for_url(database_url) == "sqlite":
        conn = sqlite3.connect(
            sqlite_path(database_url),
            timeout=timeout,
            detect_types=sqlite3.PARSE_DECLTYPES,
            check_same_thread=False,
        )
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    # psycopg only understands the plain postgresql:// scheme
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    elif database_url.startswith("postgresql+"):
        database_url = "postgresql://" + database_url.split("://", 1)[1]

    return psycopg.connect(
        database_url,
        options=f"-c statement_timeout={int(timeout * 1000)}",
    )


@contextlib.contextmanager
def reference_connection(database_id: Optional[str]) -> Iterator[object]:
    """Yield a fresh connection for ``database_id`` and close it afterwards."""
    conn = connect(database_url_for(database_id))
    try:
        yield conn
    finally:
        conn.close()


__all__ = [
    "CLASSIC_MODELS",
    "NORTHWIND",
    "KNOWN_DATABASES",
    "DatabaseConfigurationError",
    "backend_for_url",
    "connect",
    "database_url_for",
    "masked_url",
    "reference_connection",
    "resolve_database_id",
    "sqlite_path",
]
