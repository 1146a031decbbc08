"""Merge repeated observations of the same table into one catalog entry."""

from backup_catalog.catalog.models import TableMetadata


def merge_table(
    tables: list[TableMetadata],
    table: TableMetadata,
) -> list[TableMetadata]:
    """Add ``table`` to ``tables`` or enrich the entry already present.

    Entries are keyed by ``(database, table)``. An existing entry only takes
    the incoming ``query`` when its own is empty, and the incoming ``parts``
    when its own mapping is empty; non-empty fields are never overwritten.

    Args:
        tables: Catalog accumulated so far (mutated in place).
        table: Newly observed record.

    Returns:
        The same ``tables`` list, for chaining inside a traversal loop.
    """
    for existing in tables:
        if existing.database == table.database and existing.table == table.table:
            if not existing.query and table.query:
                existing.query = table.query
            if not existing.parts and table.parts:
                existing.parts = table.parts
            return tables
    tables.append(table)
    return tables
