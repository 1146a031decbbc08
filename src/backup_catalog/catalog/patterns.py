"""Shell-glob matching of ``database.table`` names.

Table selection uses comma-separated glob lists such as
``"default.*, logs.events_?"``. Matching is lenient: a malformed pattern
never aborts a backup, it simply matches nothing.

Usage:
    from backup_catalog.catalog.patterns import matches_any, split_table_patterns

    patterns = split_table_patterns("default.*,logs.events")
    matches_any("default.hits", patterns)   # True
"""

import logging
import re
from collections.abc import Iterable
from functools import lru_cache

from backup_catalog.catalog.errors import PatternError
from backup_catalog.catalog.models import TableTitle

logger = logging.getLogger(__name__)

INFORMATION_SCHEMA_DATABASES = frozenset(
    {"INFORMATION_SCHEMA", "information_schema", "_temporary_and_external_tables"}
)

_PATTERN_WHITESPACE = " \t\r\n"


def _class_char(pattern: str, i: int) -> tuple[str, int]:
    """Read one (possibly escaped) character inside a ``[...]`` class."""
    if i >= len(pattern) or pattern[i] in "-]":
        raise PatternError(f"malformed character class in pattern {pattern!r}")
    if pattern[i] == "\\":
        i += 1
        if i >= len(pattern):
            raise PatternError(f"trailing escape in pattern {pattern!r}")
    return pattern[i], i + 1


def _translate_class(pattern: str, i: int) -> tuple[str, int]:
    """Translate a character class starting just after ``[``."""
    negate = False
    if i < len(pattern) and pattern[i] == "^":
        negate = True
        i += 1

    items: list[str] = []
    while True:
        if i >= len(pattern):
            raise PatternError(f"unterminated character class in pattern {pattern!r}")
        if pattern[i] == "]" and items:
            i += 1
            break
        lo, i = _class_char(pattern, i)
        hi = lo
        if i < len(pattern) and pattern[i] == "-":
            hi, i = _class_char(pattern, i + 1)
            if hi < lo:
                raise PatternError(f"reversed range {lo}-{hi} in pattern {pattern!r}")
        items.append(re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}")

    body = "".join(items)
    return (f"[^{body}]" if negate else f"[{body}]"), i


@lru_cache(maxsize=256)
def compile_table_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a shell glob into an anchored regular expression.

    Supported syntax: ``*`` (any run of characters), ``?`` (any single
    character), ``[abc]`` / ``[a-z]`` / ``[^a-z]`` classes and ``\\``
    escapes. Dots and slashes are ordinary characters.

    Raises:
        PatternError: If the pattern is malformed.
    """
    out: list[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        i += 1
        if c == "*":
            out.append(".*")
        elif c == "?":
            out.append(".")
        elif c == "[":
            cls, i = _translate_class(pattern, i)
            out.append(cls)
        elif c == "\\":
            if i >= len(pattern):
                raise PatternError(f"trailing escape in pattern {pattern!r}")
            out.append(re.escape(pattern[i]))
            i += 1
        else:
            out.append(re.escape(c))
    return re.compile("".join(out), re.DOTALL)


def match_table_pattern(name: str, pattern: str) -> bool:
    """Match ``name`` against a single glob pattern.

    Raises:
        PatternError: If the pattern is malformed.
    """
    return compile_table_pattern(pattern).fullmatch(name) is not None


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Return True if any pattern matches ``name``.

    Each pattern is trimmed of surrounding whitespace. A malformed pattern
    counts as a non-match and the remaining patterns are still tried.
    """
    for pattern in patterns:
        try:
            if match_table_pattern(name, pattern.strip(_PATTERN_WHITESPACE)):
                return True
        except PatternError as e:
            logger.debug(f"ignoring table pattern: {e}")
    return False


def split_table_patterns(table_pattern: str) -> list[str]:
    """Split a comma-separated pattern list; empty input selects everything."""
    if not table_pattern:
        return ["*"]
    return [p.strip(_PATTERN_WHITESPACE) for p in table_pattern.split(",")]


def is_information_schema(database: str) -> bool:
    """True for the server's pseudo-databases that are never backed up."""
    return database in INFORMATION_SCHEMA_DATABASES


def is_skipped(table_name: str, skip_patterns: Iterable[str]) -> bool:
    """True if ``table_name`` matches any configured skip pattern."""
    return matches_any(table_name, skip_patterns)


def filter_tables_for_download(
    tables: Iterable[TableTitle],
    table_pattern: str,
) -> list[TableTitle]:
    """Select manifest entries by name only, before any metadata is fetched.

    Skip patterns and the information-schema exclusion are not applied
    here; the full catalog build applies them later.

    Args:
        tables: Identity pairs from a backup manifest.
        table_pattern: Comma-separated glob list (empty means all tables).

    Returns:
        Matching entries in manifest order.
    """
    patterns = split_table_patterns(table_pattern)
    return [t for t in tables if matches_any(t.full_name, patterns)]
