#!/usr/bin/env python3
"""
Validate Reference Solutions

Runs every stored solution query against its reference database and reports
the ones that fail, so broken questions are caught before students see them.

Usage:
    python scripts/validate_reference_solutions.py [reference_dir]
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlpractice import bootstrap  # noqa: E402
from sqlpractice.repositories import ReferenceDataError, load_reference_topics  # noqa: E402
from sqlpractice.services.reference_validation import (  # noqa: E402
    invalid_solutions,
    validate_solutions,
)


def main(argv=None):
    """Validate all solutions; returns the process exit code."""
    args = sys.argv[1:] if argv is None else argv
    bootstrap()

    directory = args[0] if args else None
    print("🔎 Validating reference solutions\n")
    print("=" * 60)

    try:
        topics = load_reference_topics(directory)
    except ReferenceDataError as exc:
        print(f"❌ {exc}")
        return 2

    checks = validate_solutions(topics)
    if not checks:
        print("⚠️  No SQL questions found.")
        return 0

    for check in checks:
        if check.success:
            print(f"✅ {check.topic} #{check.question_number} ({check.row_count} rows)")
        else:
            print(f"❌ {check.topic} #{check.question_number} on {check.database}: {check.error}")

    failures = invalid_solutions(checks)
    print("=" * 60)
    print(f"{len(checks) - len(failures)}/{len(checks)} solutions ran successfully.")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
