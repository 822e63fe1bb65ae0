from __future__ import annotations

from typing import Sequence

SYNTAX_ERROR_FEEDBACK = "Fix the syntax error in your query."
REFERENCE_ERROR_FEEDBACK = (
    "The reference solution for this question could not be run, so your query "
    "could not be graded. Please let your instructor know."
)
COMPARISON_ERROR_FEEDBACK = "An error occurred while comparing your query with the solution."


def compose_feedback(
    *,
    student_rows: int,
    solution_rows: int,
    student_column_count: int,
    solution_column_count: int,
    missing_columns: Sequence[str] = (),
    extra_columns: Sequence[str] = (),
) -> str:
    """Build the student-facing explanation of how the result sets compare."""
    rows_match = student_rows == solution_rows
    column_count_match = student_column_count == solution_column_count
    names_match = not missing_columns and not extra_columns

    if rows_match and column_count_match and names_match:
        return (
            "Great job! Your query is correct. It matches the expected solution in both "
            f"rows returned ({solution_rows} rows) and columns selected."
        )

    parts = ["Your query results differ from the expected solution."]

    if rows_match:
        parts.append(
            f"Your query correctly returns the expected number of rows ({solution_rows} rows)."
        )
    else:
        parts.append(
            f"Your query returns {student_rows} rows, but the expected solution "
            f"returns {solution_rows} rows."
        )

    if column_count_match and names_match:
        parts.append("Your query correctly selects all the expected columns.")
    elif column_count_match:
        parts.append("Your query has the correct number of columns, but some column names differ.")
    else:
        parts.append(
            f"Your query selects {student_column_count} columns, but the expected solution "
            f"uses {solution_column_count} columns."
        )

    if missing_columns:
        parts.append(f"Make sure to include all required columns: {', '.join(missing_columns)}.")
    if extra_columns:
        parts.append(
            f"Remove columns that are not part of the expected result: {', '.join(extra_columns)}."
        )

    return " ".join(parts)


def describe_differences(
    *,
    student_rows: int,
    solution_rows: int,
    student_column_count: int,
    solution_column_count: int,
    missing_columns: Sequence[str] = (),
    extra_columns: Sequence[str] = (),
) -> tuple[str, ...]:
    """Short, one-line descriptions of every mismatch."""
    differences: list[str] = []
    if student_column_count != solution_column_count:
        differences.append(f"Expected {solution_column_count} columns but got {student_column_count}")
    if student_rows != solution_rows:
        differences.append(f"Expected {solution_rows} rows but got {student_rows}")
    if missing_columns:
        differences.append(f"Missing columns: {', '.join(missing_columns)}")
    if extra_columns:
        differences.append(f"Extra columns: {', '.join(extra_columns)}")
    return tuple(differences)
