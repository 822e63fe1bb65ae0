"""
Scanner for the column list of a SELECT statement.

The scanner walks the text one character at a time, tracking quoted text,
comments and parenthesis depth, so commas inside function calls or string
literals never split an expression.
"""

from __future__ import annotations

import logging
from typing import Iterator

logger = logging.getLogger(__name__)

_QUOTE_PAIRS = {"'": "'", '"': '"', "`": "`", "[": "]"}
_SELECT_MODIFIERS = {"distinct", "all", "distinctrow"}
_LIST_TERMINATORS = {
    "from",
    "into",
    "where",
    "group",
    "having",
    "window",
    "order",
    "limit",
    "union",
    "intersect",
    "except",
}


class SelectParseError(ValueError):
    """Raised when SQL text cannot be segmented into top-level parts."""


def _is_ident_char(char: str) -> bool:
    return char.isalnum() or char in {"_", "$"}


def _find_closing_quote(text: str, start: int, closing: str) -> int:
    # backslash is an ordinary character in SQLite and PostgreSQL literals
    index = start
    length = len(text)
    while index < length:
        char = text[index]
        if char == closing:
            # doubled quote is an escaped quote
            if closing != "]" and text.startswith(closing * 2, index):
                index += 2
                continue
            return index
        index += 1
    raise SelectParseError("Unterminated quoted text.")


def _top_level_mask(text: str) -> list[bool]:
    """Return, per character, whether it sits at depth 0 outside quotes and comments."""
    mask = [False] * len(text)
    depth = 0
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        if char in _QUOTE_PAIRS:
            index = _find_closing_quote(text, index + 1, _QUOTE_PAIRS[char]) + 1
            continue
        if text.startswith("--", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline + 1
            continue
        if text.startswith("/*", index):
            end = text.find("*/", index + 2)
            if end == -1:
                raise SelectParseError("Unterminated block comment.")
            index = end + 2
            continue

        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise SelectParseError("Unbalanced closing parenthesis.")
        elif depth == 0:
            mask[index] = True
        index += 1

    if depth != 0:
        raise SelectParseError("Unbalanced opening parenthesis.")
    return mask


def _top_level_words(text: str, mask: list[bool]) -> Iterator[tuple[int, int, str]]:
    """Yield ``(start, end, lowercase_word)`` for each bare word at depth 0."""
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        starts_word = (
            mask[index]
            and (char.isalpha() or char == "_")
            and (index == 0 or not _is_ident_char(text[index - 1]))
        )
        if not starts_word:
            index += 1
            continue
        end = index
        while end < length and mask[end] and _is_ident_char(text[end]):
            end += 1
        yield index, end, text[index:end].lower()
        index = end


def split_top_level(expression_list: str) -> list[str]:
    """
    Split a comma separated list on commas at parenthesis depth 0.

    Commas inside function calls, subqueries, quoted identifiers, string
    literals and comments are kept. Empty pieces are dropped.

    Raises:
        SelectParseError: If quotes, comments or parentheses are unbalanced.
    """
    mask = _top_level_mask(expression_list)
    parts: list[str] = []
    start = 0
    for index, char in enumerate(expression_list):
        if char == "," and mask[index]:
            parts.append(expression_list[start:index])
            start = index + 1
    parts.append(expression_list[start:])
    return [part.strip() for part in parts if part.strip()]


def extract_select_clause(sql: str) -> str:
    """
    Return the raw column list of the outermost SELECT in ``sql``.

    Raises:
        SelectParseError: If there is no top-level SELECT or the text is malformed.
    """
    mask = _top_level_mask(sql)
    words = list(_top_level_words(sql, mask))

    select_at = next((pos for pos, word in enumerate(words) if word[2] == "select"), None)
    if select_at is None:
        raise SelectParseError("No top-level SELECT found.")

    start = words[select_at][1]
    following = words[select_at + 1 :]
    for word_start, word_end, word in following:
        if word in _SELECT_MODIFIERS and not sql[start:word_start].strip():
            start = word_end
        else:
            break

    end = len(sql)
    for word_start, _word_end, word in following:
        if word_start >= start and word in _LIST_TERMINATORS:
            end = word_start
            break

    for index in range(start, end):
        if sql[index] == ";" and mask[index]:
            end = index
            break

    return sql[start:end]


def extract_select_expressions(sql: str) -> list[str]:
    """
    Return the column expressions of the outermost SELECT, in order.

    ``SELECT *`` yields ``["*"]``. Text the scanner cannot segment yields an
    empty list instead of an error.
    """
    if not sql or not sql.strip():
        return []
    try:
        return split_top_level(extract_select_clause(sql))
    except SelectParseError as exc:
        logger.debug("Could not split SELECT list: %s", exc)
        return []


def _is_single_identifier(text: str) -> bool:
    if len(text) >= 2 and text[0] in _QUOTE_PAIRS and text[-1] == _QUOTE_PAIRS[text[0]]:
        return True
    return bool(text) and all(_is_ident_char(char) for char in text)


def strip_alias(expression: str) -> str:
    """Drop a trailing top-level ``AS <alias>`` from a column expression."""
    text = expression.strip()
    try:
        mask = _top_level_mask(text)
    except SelectParseError:
        return text

    as_words = [word for word in _top_level_words(text, mask) if word[2] == "as"]
    if not as_words:
        return text

    as_start, as_end, _ = as_words[-1]
    alias = text[as_end:].strip()
    if as_start > 0 and _is_single_identifier(alias):
        return text[:as_start].rstrip()
    return text
