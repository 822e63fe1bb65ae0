"""Grade a student's query by comparing its result set with the reference solution's."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from databases import resolve_database_id

from . import query_runner
from .column_matching import reconcile_columns
from .feedback import (
    COMPARISON_ERROR_FEEDBACK,
    REFERENCE_ERROR_FEEDBACK,
    SYNTAX_ERROR_FEEDBACK,
    compose_feedback,
    describe_differences,
)
from .query_runner import QueryResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonOutcome:
    overall_correct: bool
    rows_match: bool
    column_count_match: bool
    column_names_match: bool
    feedback: str
    student_result: QueryResult
    solution_result: QueryResult
    missing_columns: tuple[str, ...] = ()
    extra_columns: tuple[str, ...] = ()
    differences: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "is_correct": self.overall_correct,
            "rows_match": self.rows_match,
            "columns_match": self.column_count_match,
            "column_names_match": self.column_names_match,
            "missing_columns": list(self.missing_columns),
            "extra_columns": list(self.extra_columns),
            "differences": list(self.differences),
            "feedback": self.feedback,
            "student_result": self.student_result.to_dict(),
            "solution_result": self.solution_result.to_dict(),
        }


def _ungraded(
    student_result: QueryResult,
    solution_result: QueryResult,
    feedback: str,
) -> ComparisonOutcome:
    return ComparisonOutcome(
        overall_correct=False,
        rows_match=False,
        column_count_match=False,
        column_names_match=False,
        feedback=feedback,
        student_result=student_result,
        solution_result=solution_result,
    )


def grade_results(
    student_result: QueryResult,
    solution_result: QueryResult,
    *,
    student_sql: str = "",
    solution_sql: str = "",
) -> ComparisonOutcome:
    """
    Compare two successful results.

    The answer is correct only when the row count is identical, the column
    count is identical and every column reconciles with a solution column.
    """
    rows_match = student_result.row_count == solution_result.row_count
    column_count_match = len(student_result.columns) == len(solution_result.columns)
    reconciliation = reconcile_columns(
        solution_result.columns,
        student_result.columns,
        solution_sql=solution_sql,
        student_sql=student_sql,
    )

    counts = dict(
        student_rows=student_result.row_count,
        solution_rows=solution_result.row_count,
        student_column_count=len(student_result.columns),
        solution_column_count=len(solution_result.columns),
        missing_columns=reconciliation.missing_columns,
        extra_columns=reconciliation.extra_columns,
    )
    return ComparisonOutcome(
        overall_correct=rows_match and column_count_match and reconciliation.columns_match,
        rows_match=rows_match,
        column_count_match=column_count_match,
        column_names_match=reconciliation.columns_match,
        feedback=compose_feedback(**counts),
        student_result=student_result,
        solution_result=solution_result,
        missing_columns=reconciliation.missing_columns,
        extra_columns=reconciliation.extra_columns,
        differences=describe_differences(**counts),
    )


def compare(
    student_sql: str,
    solution_sql: str,
    database_id: Optional[str] = None,
) -> ComparisonOutcome:
    """
    Run the student's query and the reference solution and grade the student.

    Never raises: execution failures and unexpected comparison errors come
    back as an outcome with ``overall_correct=False`` and explanatory feedback.
    The solution is always executed so its shape can be shown alongside a
    failing student query.
    """
    student_result = query_runner.execute(student_sql, database_id)
    solution_result = query_runner.execute(solution_sql, database_id)

    if not student_result.success:
        return _ungraded(student_result, solution_result, SYNTAX_ERROR_FEEDBACK)

    if not solution_result.success:
        logger.error(
            "Reference solution failed on %s: %s",
            resolve_database_id(database_id),
            solution_result.message,
        )
        return _ungraded(student_result, solution_result, REFERENCE_ERROR_FEEDBACK)

    try:
        return grade_results(
            student_result,
            solution_result,
            student_sql=student_sql,
            solution_sql=solution_sql,
        )
    except Exception:
        logger.exception("Unexpected error while comparing query results")
        return _ungraded(student_result, solution_result, COMPARISON_ERROR_FEEDBACK)
