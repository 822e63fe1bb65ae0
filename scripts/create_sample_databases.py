#!/usr/bin/env python3
"""
Create Sample Reference Databases

Writes small SQLite editions of ClassicModels and Northwind to the paths
configured in CLASSICMODELS_DATABASE_URL / NORTHWIND_DATABASE_URL, for local
development without a database server.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from databases import (  # noqa: E402
    KNOWN_DATABASES,
    backend_for_url,
    database_url_for,
    masked_url,
    sqlite_path,
)
from databases.samples import build_sample_database  # noqa: E402
from sqlpractice import bootstrap  # noqa: E402


def main():
    """Build a sample database for every SQLite-backed reference database."""
    bootstrap()
    print("🗄️  Creating sample reference databases\n")

    for database_id in KNOWN_DATABASES:
        url = database_url_for(database_id)
        if backend_for_url(url) != "sqlite":
            print(f"⏭️  {database_id}: {masked_url(url)} is not SQLite, skipping")
            continue
        path = sqlite_path(url)
        if path == ":memory:":
            print(f"⏭️  {database_id}: in-memory URL, skipping")
            continue
        build_sample_database(path, database_id)
        print(f"✅ {database_id}: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
