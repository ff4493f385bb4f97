"""
SQL token helpers - placeholder counting and translation.

Uses sqlparse so that question marks inside string literals, quoted
identifiers and comments are never mistaken for placeholders.
"""

from typing import Iterator, Sequence

import sqlparse
from sqlparse import tokens as T

import logging
logger = logging.getLogger(__name__)

QMARK = "?"


def _flatten(sql: str) -> Iterator:
    """Yield every leaf token of every statement in sql."""
    for statement in sqlparse.parse(sql):
        yield from statement.flatten()


def _is_qmark(token) -> bool:
    return token.ttype in T.Name.Placeholder and token.value == QMARK


def count_placeholders(sql: str) -> int:
    """
    Count positional ``?`` placeholders in sql.

    Args:
        sql: SQL text

    Returns:
        Number of placeholders outside literals and comments
    """
    if not sql:
        return 0
    return sum(1 for token in _flatten(sql) if _is_qmark(token))


def translate_placeholders(sql: str, paramstyle: str) -> str:
    """
    Rewrite ``?`` placeholders for a DB-API paramstyle.

    Only "qmark" and "format" are handled. For "format" (pymysql), every
    literal percent sign is doubled because the driver applies Python
    %-formatting to the whole statement when parameters are bound.

    Args:
        sql: SQL text using ``?`` placeholders
        paramstyle: DB-API paramstyle of the target driver

    Returns:
        SQL text ready for the driver
    """
    if paramstyle == "qmark" or not sql:
        return sql
    if paramstyle != "format":
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")

    out = []
    for token in _flatten(sql):
        if _is_qmark(token):
            out.append("%s")
        else:
            out.append(token.value.replace("%", "%%"))
    return "".join(out)


def inline_placeholders(sql: str, literals: Sequence[str]) -> str:
    """
    Replace each ``?`` placeholder, in order, with a pre-rendered literal.

    Used to display bound statements; the result is never executed.

    Raises:
        ValueError: literals and placeholders differ in number
    """
    remaining = iter(literals)
    out = []
    used = 0
    for token in _flatten(sql):
        if _is_qmark(token):
            try:
                out.append(next(remaining))
            except StopIteration:
                raise ValueError("More placeholders than values") from None
            used += 1
        else:
            out.append(token.value)
    if used != len(literals):
        raise ValueError(f"{len(literals)} values for {used} placeholders")
    return "".join(out)
