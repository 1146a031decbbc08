"""Table catalog: discovery, filtering, ordering and database remapping.

Usage:
    from backup_catalog.catalog import get_table_list_local, change_database
"""

from backup_catalog.catalog.builder import (
    get_table_list_local,
    get_table_list_remote,
    read_backup_metadata,
    table_path_encode,
)
from backup_catalog.catalog.errors import (
    CatalogBuildCancelled,
    CatalogError,
    PatternError,
    QueryRewriteError,
)
from backup_catalog.catalog.models import BackupMetadata, Part, TableMetadata, TableTitle
from backup_catalog.catalog.ordering import engine_priority, sort_tables
from backup_catalog.catalog.partitions import filter_parts_by_partitions, parse_partitions
from backup_catalog.catalog.patterns import (
    filter_tables_for_download,
    is_information_schema,
    matches_any,
)
from backup_catalog.catalog.reconcile import merge_table
from backup_catalog.catalog.remap import change_database, parse_database_mapping

__all__ = [
    "BackupMetadata",
    "Part",
    "TableMetadata",
    "TableTitle",
    "CatalogError",
    "CatalogBuildCancelled",
    "PatternError",
    "QueryRewriteError",
    "get_table_list_local",
    "get_table_list_remote",
    "read_backup_metadata",
    "table_path_encode",
    "engine_priority",
    "sort_tables",
    "filter_parts_by_partitions",
    "parse_partitions",
    "filter_tables_for_download",
    "is_information_schema",
    "matches_any",
    "merge_table",
    "change_database",
    "parse_database_mapping",
]
