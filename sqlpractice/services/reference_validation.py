"""Check that every stored reference solution actually runs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional

from config.settings import get_settings
from sqlpractice.repositories import Topic, load_reference_topics

from . import query_runner

logger = logging.getLogger(__name__)

NO_SOLUTION_MESSAGE = "No solution query stored for this question."


@dataclass(slots=True)
class SolutionCheck:
    topic: str
    question_number: int
    database: str
    success: bool
    row_count: int = 0
    error: Optional[str] = None


def validate_solutions(topics: Iterable[Topic]) -> list[SolutionCheck]:
    """Run the solution of every SQL question and record whether it succeeded."""
    checks: list[SolutionCheck] = []
    for topic in topics:
        if not topic.is_sql:
            continue
        for question in topic.questions:
            if not question.solution:
                checks.append(
                    SolutionCheck(
                        topic=topic.name,
                        question_number=question.number,
                        database=topic.database,
                        success=False,
                        error=NO_SOLUTION_MESSAGE,
                    )
                )
                continue

            result = query_runner.execute(question.solution, topic.database)
            checks.append(
                SolutionCheck(
                    topic=topic.name,
                    question_number=question.number,
                    database=topic.database,
                    success=result.success,
                    row_count=result.row_count,
                    error=None if result.success else result.message,
                )
            )
    return checks


def invalid_solutions(checks: Iterable[SolutionCheck]) -> list[SolutionCheck]:
    return [check for check in checks if not check.success]


def load_validated_topics(directory: str | os.PathLike[str] | None = None) -> list[Topic]:
    """
    Load reference topics, validating their solutions when enabled.

    Failing solutions are logged, not raised, so one broken question does not
    keep the rest of the catalogue from loading.
    """
    topics = load_reference_topics(directory)
    if not get_settings().VALIDATE_REFERENCE_SOLUTIONS:
        return topics

    failures = invalid_solutions(validate_solutions(topics))
    for check in failures:
        logger.warning(
            "Reference solution for %s question %s does not run on %s: %s",
            check.topic,
            check.question_number,
            check.database,
            check.error,
        )
    if not failures:
        logger.info("All reference solutions ran successfully")
    return topics
