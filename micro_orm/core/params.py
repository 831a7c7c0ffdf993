"""SQL parameter handling.

Statements are written with `:name` placeholders. This module finds them
and converts them to the driver's paramstyle, skipping string literals and
PostgreSQL `::typecast` syntax.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Matches :name but not ::typecast and not inside words
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")


def _code_segments(sql: str) -> list[tuple[bool, str]]:
    """Split *sql* into ``(is_literal, text)`` segments."""
    segments: list[tuple[bool, str]] = []
    last_end = 0
    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            segments.append((False, sql[last_end:start]))
        segments.append((True, match.group()))
        last_end = end
    if last_end < len(sql):
        segments.append((False, sql[last_end:]))
    return segments


def find_placeholders(sql: str) -> list[str]:
    """Return the distinct `:name` placeholders of *sql* in first-seen order."""
    names: list[str] = []
    for is_literal, text in _code_segments(sql):
        if is_literal:
            continue
        for name in _PARAM_PATTERN.findall(text):
            if name not in names:
                names.append(name)
    return names


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals."""
    return "".join(
        text if is_literal else _PARAM_PATTERN.sub(r"%(\1)s", text)
        for is_literal, text in _code_segments(sql)
    )
