"""Create/drop ordering of tables by statement shape.

Views and the inner tables of materialized views must be created after the
tables they read from and dropped before them. Distributed and streaming
engine tables hold no local data and always go last.

Usage:
    from backup_catalog.catalog.ordering import sort_tables

    sort_tables(tables, drop=False)   # restore order
    sort_tables(tables, drop=True)    # drop order
"""

from enum import Enum

from backup_catalog.catalog.models import TableMetadata


class TableKind(str, Enum):
    """Statement classification used for ordering."""

    PLAIN = "plain"
    INNER_TABLE = "inner_table"
    VIEW = "view"
    DICTIONARY = "dictionary"
    STREAMING = "streaming"


# kind -> (create priority, drop priority); lower sorts first
PRIORITIES: dict[TableKind, tuple[int, int]] = {
    TableKind.PLAIN: (0, 0),
    TableKind.INNER_TABLE: (1, 2),
    TableKind.VIEW: (2, 1),
    TableKind.DICTIONARY: (3, 3),
    TableKind.STREAMING: (4, 4),
}

STREAMING_ENGINE_MARKERS = (
    "ENGINE = Distributed",
    "ENGINE = Kafka",
    "ENGINE = RabbitMQ",
)

VIEW_PREFIXES = (
    "CREATE VIEW",
    "CREATE LIVE VIEW",
    "CREATE WINDOW VIEW",
    "ATTACH WINDOW VIEW",
    "CREATE MATERIALIZED VIEW",
    "ATTACH MATERIALIZED VIEW",
)

INNER_TABLE_MARKERS = (".inner_id.", ".inner.")


def classify_query(query: str) -> TableKind:
    """Classify a definition query; the first matching rule wins."""
    if any(marker in query for marker in STREAMING_ENGINE_MARKERS):
        return TableKind.STREAMING
    if query.startswith("CREATE DICTIONARY"):
        return TableKind.DICTIONARY
    if query.startswith(VIEW_PREFIXES):
        return TableKind.VIEW
    if query.startswith("CREATE TABLE") and any(m in query for m in INNER_TABLE_MARKERS):
        return TableKind.INNER_TABLE
    return TableKind.PLAIN


def engine_priority(query: str, drop: bool) -> int:
    """Sort key of a definition query for the given direction."""
    create_priority, drop_priority = PRIORITIES[classify_query(query)]
    return drop_priority if drop else create_priority


def sort_tables(tables: list[TableMetadata], drop: bool) -> None:
    """Stable in-place sort of ``tables`` into safe processing order."""
    tables.sort(key=lambda t: engine_priority(t.query, drop))
