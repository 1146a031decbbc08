"""Partition selection for partial backups and restores.

Data part directories are named ``<partition_id>_<min_block>_<max_block>_<level>``,
so the partition a part belongs to is the prefix before the first underscore.
"""

from collections.abc import Iterable

from backup_catalog.catalog.models import TableMetadata


def partition_id_of(part_name: str) -> str:
    """Return the partition id encoded in a data part name."""
    return part_name.split("_", 1)[0]


def is_part_in_partition(part_name: str, partitions: set[str] | frozenset[str]) -> bool:
    return partition_id_of(part_name) in partitions


def parse_partitions(values: str | Iterable[str] | None) -> set[str]:
    """Build a partition selection from ``"id1,id2"`` or a list of such strings.

    Blank items are dropped. An empty result means "all partitions".
    """
    if not values:
        return set()
    if isinstance(values, str):
        values = [values]
    selection: set[str] = set()
    for value in values:
        for item in value.split(","):
            item = item.strip()
            if item:
                selection.add(item)
    return selection


def filter_parts_by_partitions(
    table: TableMetadata,
    partitions: set[str] | frozenset[str] | None,
) -> None:
    """Keep only the parts of ``table`` that belong to the selected partitions.

    No-op for an empty selection. Disks whose parts are all filtered out are
    kept with an empty list.
    """
    if not partitions:
        return
    for disk, parts in table.parts.items():
        table.parts[disk] = [p for p in parts if is_part_in_partition(p.name, partitions)]
