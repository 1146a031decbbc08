"""Retarget captured definition queries to a different database.

Used by ``--restore-database-mapping``: a backup taken from database ``a``
is restored into database ``b`` by rewriting the database name inside each
``CREATE``/``ATTACH`` statement and issuing fresh table UUIDs.

Only a fixed set of statement shapes is rewritten (``TABLE``, ``VIEW``,
``MATERIALIZED VIEW ... TO ...``, ``LIVE VIEW``, ``WINDOW VIEW``,
``DICTIONARY``, with optional ``OR REPLACE`` and ``IF NOT EXISTS``). A
non-empty query that starts with neither ``CREATE`` nor ``ATTACH``, or whose
definition clause has no ``db.name`` segment to rewrite, is rejected.
``FUNCTION`` definitions have no database and keep their query.

Usage:
    from backup_catalog.catalog.remap import change_database, parse_database_mapping

    rule = parse_database_mapping("prod:staging")
    change_database(tables, rule)
"""

import logging
import re
import uuid
from collections.abc import Iterable

from backup_catalog.catalog.errors import QueryRewriteError
from backup_catalog.catalog.models import TableMetadata

logger = logging.getLogger(__name__)

QUERY_RE = re.compile(
    r"^(?P<prefix>(?:CREATE|ATTACH)(?: OR REPLACE)? "
    r"(?:TABLE|VIEW|MATERIALIZED VIEW|LIVE VIEW|WINDOW VIEW|DICTIONARY|FUNCTION) "
    r"(?:IF NOT EXISTS )?)"
    r"(?P<q1>`?)(?P<db>[^\s`.]*)(?P<q2>`?)\.(?P<name>`[^`]*`|[^\s`.]*)"
    r"(?:(?P<to> TO )(?P<q3>`?)(?P<to_db>[^\s`.]*)(?P<q4>`?)\.)?",
    re.MULTILINE,
)
# user-defined functions are global and carry no database segment
FUNCTION_RE = re.compile(r"^(?:CREATE|ATTACH)(?: OR REPLACE)? FUNCTION ", re.MULTILINE)
CREATE_RE = re.compile(r"^CREATE", re.MULTILINE)
ATTACH_RE = re.compile(r"^ATTACH", re.MULTILINE)
UUID_RE = re.compile(r"UUID '[a-f\d\-]+'")


def parse_database_mapping(values: str | Iterable[str] | None) -> dict[str, str]:
    """Parse ``"src:dst,src2:dst2"`` (or a list of such strings) into a rule.

    Raises:
        ValueError: If an item is not of the form ``source:target``.
    """
    if not values:
        return {}
    if isinstance(values, str):
        values = [values]
    rule: dict[str, str] = {}
    for value in values:
        for item in value.split(","):
            item = item.strip()
            if not item:
                continue
            source, sep, target = item.partition(":")
            source, target = source.strip(), target.strip()
            if not sep or not source or not target:
                raise ValueError(
                    f"Invalid database mapping '{item}', expected 'source:target'"
                )
            rule[source] = target
    return rule


def _substitute_database(query: str, target_database: str) -> tuple[str, int]:
    """Rewrite the leading definition clause; returns the substitution count."""

    def _substitute(m: re.Match[str]) -> str:
        result = f"{m['prefix']}{m['q1']}{target_database}{m['q2']}.{m['name']}"
        if m["to"]:
            result += f"{m['to']}{m['q3']}{target_database}{m['q4']}."
        return result

    return QUERY_RE.subn(_substitute, query, count=1)


def rewrite_query_database(query: str, target_database: str) -> str:
    """Replace the database segments of the leading definition clause.

    Both the object's own database and the ``TO`` destination database (for
    materialized views) are set to ``target_database``. Every ``UUID '...'``
    literal is replaced with a freshly generated UUID.
    """
    query, _ = _substitute_database(query, target_database)
    return UUID_RE.sub(lambda _: f"UUID '{uuid.uuid4()}'", query)


def change_database(tables: list[TableMetadata], rule: dict[str, str]) -> None:
    """Apply a database mapping rule to every matching catalog entry in place.

    Entries whose database is not a key of ``rule`` are left alone, as are
    mapped entries with an empty query. A ``FUNCTION`` definition carries no
    database segment, so only the entry's ``database`` field changes.

    Args:
        tables: Catalog to rewrite.
        rule: Source database name -> target database name.

    Raises:
        QueryRewriteError: If a mapped entry's query starts with neither
            ``CREATE`` nor ``ATTACH``, or is not one of the rewritable
            ``db.name`` shapes. Entries before it are already rewritten.
    """
    for table in tables:
        target_database = rule.get(table.database)
        if target_database is None:
            continue
        if not CREATE_RE.search(table.query) and not ATTACH_RE.search(table.query):
            if not table.query:
                continue
            raise QueryRewriteError(table.database, target_database, table.query)

        query, count = _substitute_database(table.query, target_database)
        if count == 0 and not FUNCTION_RE.search(table.query):
            raise QueryRewriteError(table.database, target_database, table.query)

        logger.debug(f"remapping {table.full_name} to database {target_database}")
        table.query = UUID_RE.sub(lambda _: f"UUID '{uuid.uuid4()}'", query)
        table.database = target_database
