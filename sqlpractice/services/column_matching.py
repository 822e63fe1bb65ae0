"""
Column-name reconciliation between a student's result set and the reference result set.

Columns are paired in three passes. Each pass only looks at positions the
previous passes left unmatched:

1. exact column name
2. equivalent SELECT expression (aliases, quoting, spacing and case ignored)
3. loosely normalized column name, for engine-generated names like ``sum(price)``

PostgreSQL labels every unaliased expression ``?column?``. Such labels never
pair by name; only the expression pass can match them.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from functools import reduce
from typing import NamedTuple, Optional, Sequence

from .select_parser import extract_select_expressions, strip_alias

logger = logging.getLogger(__name__)

_QUOTE_TABLE = str.maketrans("", "", "`\"'")
_OPERATOR_SPACING_RE = re.compile(r"\s*([-+*/%=<>!(),|])\s*")
_WHITESPACE_RE = re.compile(r"\s+")
_UNDERSCORE_RUN_RE = re.compile(r"_+")
_NAME_TOKENS = {
    "+": "_plus_",
    "-": "_minus_",
    "*": "_times_",
    "/": "_div_",
    "%": "_mod_",
    "(": "_",
    ")": "_",
}

Key = Optional[str]

_GENERATED_NAMES = frozenset({"?column?"})


def is_generated_name(name: str) -> bool:
    return str(name).strip().lower() in _GENERATED_NAMES


def normalize_expression(expression: str) -> str:
    """Canonical form of a SELECT expression: no alias, no quotes, fixed spacing, lower case."""
    text = strip_alias(expression).lower().translate(_QUOTE_TABLE)
    text = _OPERATOR_SPACING_RE.sub(r"\1", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_column_name(name: str) -> str:
    """Loose form of a column label, e.g. ``SUM( price )`` -> ``sum_price``."""
    text = str(name).lower().translate(_QUOTE_TABLE)
    text = "".join(_NAME_TOKENS.get(char, "_" if char.isspace() else char) for char in text)
    return _UNDERSCORE_RUN_RE.sub("_", text).strip("_")


@dataclass(frozen=True)
class MatchState:
    """Positions still unpaired plus the ``(solution, student)`` pairs found so far."""

    unmatched_solution: tuple[int, ...]
    unmatched_student: tuple[int, ...]
    pairs: tuple[tuple[int, int], ...] = ()

    @classmethod
    def initial(cls, solution_count: int, student_count: int) -> "MatchState":
        return cls(tuple(range(solution_count)), tuple(range(student_count)))


class MatchPass(NamedTuple):
    name: str
    solution_keys: tuple[Key, ...]
    student_keys: tuple[Key, ...]


def match_by_key(
    state: MatchState,
    solution_keys: Sequence[Key],
    student_keys: Sequence[Key],
) -> MatchState:
    """
    Greedily pair unmatched positions whose keys are equal.

    Solution positions are visited in order and take the first free student
    position with the same key. ``None`` keys never match. Returns a new
    state; ``state`` itself is left untouched.
    """
    free_student = list(state.unmatched_student)
    left_solution: list[int] = []
    pairs = list(state.pairs)

    for solution_pos in state.unmatched_solution:
        key = solution_keys[solution_pos]
        partner = None
        if key is not None:
            partner = next((pos for pos in free_student if student_keys[pos] == key), None)
        if partner is None:
            left_solution.append(solution_pos)
            continue
        free_student.remove(partner)
        pairs.append((solution_pos, partner))

    return MatchState(tuple(left_solution), tuple(free_student), tuple(pairs))


def _apply_pass(state: MatchState, match_pass: MatchPass) -> MatchState:
    if not state.unmatched_solution or not state.unmatched_student:
        return state
    next_state = match_by_key(state, match_pass.solution_keys, match_pass.student_keys)
    logger.debug(
        "Column pass %r paired %d column(s)",
        match_pass.name,
        len(next_state.pairs) - len(state.pairs),
    )
    return next_state


def expression_keys(sql: str, column_count: int) -> tuple[Key, ...]:
    """
    Normalized SELECT expressions aligned with result columns.

    Only usable when the SELECT list has one expression per result column;
    otherwise (wildcards, unparseable text) every key is ``None``.
    """
    expressions = extract_select_expressions(sql)
    if len(expressions) != column_count:
        return (None,) * column_count

    keys: list[Key] = []
    for expression in expressions:
        bare = expression.strip()
        if bare == "*" or bare.endswith(".*"):
            keys.append(None)
        else:
            keys.append(normalize_expression(expression) or None)
    return tuple(keys)


def exact_keys(columns: Sequence[str]) -> tuple[Key, ...]:
    return tuple(None if is_generated_name(column) else column for column in columns)


def name_keys(columns: Sequence[str]) -> tuple[Key, ...]:
    return tuple(
        None if is_generated_name(column) else normalize_column_name(column) or None
        for column in columns
    )


@dataclass(frozen=True)
class ColumnReconciliation:
    pairs: tuple[tuple[int, int], ...]
    missing_columns: tuple[str, ...]
    extra_columns: tuple[str, ...]

    @property
    def columns_match(self) -> bool:
        return not self.missing_columns and not self.extra_columns


def _finish(
    state: MatchState,
    solution_columns: Sequence[str],
    student_columns: Sequence[str],
) -> ColumnReconciliation:
    return ColumnReconciliation(
        pairs=state.pairs,
        missing_columns=tuple(solution_columns[pos] for pos in state.unmatched_solution),
        extra_columns=tuple(student_columns[pos] for pos in state.unmatched_student),
    )


def reconcile_columns(
    solution_columns: Sequence[str],
    student_columns: Sequence[str],
    *,
    solution_sql: str = "",
    student_sql: str = "",
) -> ColumnReconciliation:
    """
    Decide which student columns stand for which solution columns.

    Identical column names in any order are a match without looking at the
    SQL text, unless the engine generated some of them. Otherwise the three
    passes run in order over the SQL texts.
    """
    solution_columns = tuple(solution_columns)
    student_columns = tuple(student_columns)
    state = MatchState.initial(len(solution_columns), len(student_columns))

    trusted_names = not any(is_generated_name(column) for column in solution_columns)
    if trusted_names and Counter(solution_columns) == Counter(student_columns):
        state = match_by_key(state, solution_columns, student_columns)
        return _finish(state, solution_columns, student_columns)

    passes = (
        MatchPass("exact name", exact_keys(solution_columns), exact_keys(student_columns)),
        MatchPass(
            "expression",
            expression_keys(solution_sql, len(solution_columns)),
            expression_keys(student_sql, len(student_columns)),
        ),
        MatchPass("normalized name", name_keys(solution_columns), name_keys(student_columns)),
    )
    state = reduce(_apply_pass, passes, state)
    return _finish(state, solution_columns, student_columns)
