"""Service layer for running, grading and validating practice queries."""

from . import column_matching, comparator, feedback, query_runner, reference_validation, select_parser

__all__ = [
    "column_matching",
    "comparator",
    "feedback",
    "query_runner",
    "reference_validation",
    "select_parser",
]
