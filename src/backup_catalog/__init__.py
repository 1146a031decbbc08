"""backup-catalog: table catalog engine for ClickHouse backups.

Discovers the tables of a backup (from a local metadata directory or a
remote manifest), filters them by glob patterns and partitions, orders
them for safe create/drop, and retargets definition queries for
cross-database restore.

Usage:
    from backup_catalog import get_table_list_local, change_database
    from backup_catalog import TableMetadata, load_catalog_config
"""

__version__ = "0.1.0"

# Catalog
from backup_catalog.catalog.builder import (
    get_table_list_local,
    get_table_list_remote,
    read_backup_metadata,
)
from backup_catalog.catalog.errors import (
    CatalogBuildCancelled,
    CatalogError,
    QueryRewriteError,
)
from backup_catalog.catalog.models import BackupMetadata, Part, TableMetadata, TableTitle
from backup_catalog.catalog.patterns import filter_tables_for_download
from backup_catalog.catalog.remap import change_database, parse_database_mapping

# Config
from backup_catalog.config.loader import load_catalog_config
from backup_catalog.config.models import CatalogConfig

# Storage
from backup_catalog.storage.base import RemoteStorage
from backup_catalog.storage.local import LocalStorage

__all__ = [
    # Catalog
    "get_table_list_local",
    "get_table_list_remote",
    "read_backup_metadata",
    "filter_tables_for_download",
    "change_database",
    "parse_database_mapping",
    "BackupMetadata",
    "Part",
    "TableMetadata",
    "TableTitle",
    "CatalogError",
    "CatalogBuildCancelled",
    "QueryRewriteError",
    # Config
    "load_catalog_config",
    "CatalogConfig",
    # Storage
    "RemoteStorage",
    "LocalStorage",
]
