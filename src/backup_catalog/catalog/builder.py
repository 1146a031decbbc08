"""Assemble the ordered table catalog of a backup.

Two sources are supported:

1. **Local** (``get_table_list_local``): walks a backup's ``metadata/``
   directory, where every table has ``<db>/<table>.json`` (full sidecar) or
   ``<db>/<table>.sql`` (bare statement from an embedded backup, with its
   parts listed under the sibling ``data/`` directory).
2. **Remote** (``get_table_list_remote``): iterates the backup manifest and
   fetches each selected table's JSON sidecar from remote storage.

Both apply skip patterns, include patterns and the information-schema
exclusion, merge duplicate observations and return the catalog sorted into
create or drop order.

Usage:
    from backup_catalog.catalog.builder import get_table_list_local

    tables = get_table_list_local(
        "/var/lib/clickhouse/backup/daily/metadata",
        "default.*",
        drop=False,
        partitions={"202401"},
        skip_tables=["system.*"],
    )
"""

import asyncio
import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path
from urllib.parse import quote, unquote

from backup_catalog.catalog.errors import CatalogBuildCancelled
from backup_catalog.catalog.models import BackupMetadata, Part, TableMetadata
from backup_catalog.catalog.ordering import sort_tables
from backup_catalog.catalog.partitions import filter_parts_by_partitions
from backup_catalog.catalog.patterns import (
    is_information_schema,
    is_skipped,
    matches_any,
    split_table_patterns,
)
from backup_catalog.catalog.reconcile import merge_table
from backup_catalog.storage.base import RemoteStorage

logger = logging.getLogger(__name__)

STATEMENT_SUFFIX = ".sql"
SIDECAR_SUFFIX = ".json"


def table_path_encode(name: str) -> str:
    """Encode a database or table name as a single path segment."""
    return quote(name, safe="$&+:=@").replace(".", "%2E").replace("-", "%2D")


def _walk_files(root: Path) -> Iterator[Path]:
    """Yield regular files below ``root`` depth-first, in lexical order."""
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_files(Path(entry.path))
        elif entry.is_file(follow_symlinks=False):
            yield Path(entry.path)


def _list_data_parts(metadata_path: Path, names: Sequence[str]) -> list[str]:
    """List the part directories of an embedded-backup table.

    A missing data directory is not an error: the table was captured
    without data.
    """
    data_path = Path(str(metadata_path).replace("/metadata", "/data", 1)).joinpath(*names)
    try:
        return sorted(os.listdir(data_path))
    except FileNotFoundError as e:
        logger.warning(f"no data parts for {'/'.join(names)}: {e}")
        return []


def _table_from_statement_file(
    file_path: Path,
    metadata_path: Path,
    names: Sequence[str],
    database: str,
    table: str,
    embedded_backup_disk: str,
) -> TableMetadata:
    """Build a record from a bare ``.sql`` capture and its data directory."""
    query = file_path.read_bytes().decode("utf-8", errors="replace")
    # embedded backups on object disks may store only object keys in the .sql file
    if query.startswith("ATTACH"):
        query = "CREATE" + query[len("ATTACH"):]
    elif not query.startswith("CREATE"):
        query = ""

    parts = [Part(name=name) for name in _list_data_parts(metadata_path, names)]
    return TableMetadata(
        database=database,
        table=table,
        query=query,
        parts={embedded_backup_disk: parts},
    )


def get_table_list_local(
    metadata_path: str | Path,
    table_pattern: str,
    drop: bool,
    partitions: set[str] | None = None,
    *,
    skip_tables: Sequence[str] = (),
    embedded_backup_disk: str = "default",
) -> list[TableMetadata]:
    """Build the catalog from a local backup's metadata directory.

    Args:
        metadata_path: The backup's ``metadata`` directory.
        table_pattern: Comma-separated include globs (empty means all).
        drop: Order for dropping (True) or creating (False).
        partitions: Partition ids to keep (empty or None means all).
        skip_tables: Globs of tables to exclude even when included.
        embedded_backup_disk: Disk name recorded for parts found next to
            ``.sql`` captures.

    Returns:
        Deduplicated catalog in safe processing order.

    Raises:
        OSError: If the directory walk or a file read fails.
        pydantic.ValidationError: If a JSON sidecar is malformed.
    """
    metadata_path = Path(metadata_path)
    patterns = split_table_patterns(table_pattern)
    result: list[TableMetadata] = []

    for file_path in _walk_files(metadata_path):
        if file_path.name.endswith(STATEMENT_SUFFIX):
            suffix = STATEMENT_SUFFIX
        elif file_path.name.endswith(SIDECAR_SUFFIX):
            suffix = SIDECAR_SUFFIX
        else:
            continue

        rel_parts = file_path.relative_to(metadata_path).parts
        if len(rel_parts) != 2:
            continue
        names = (rel_parts[0], rel_parts[1][: -len(suffix)])
        database, table = unquote(names[0]), unquote(names[1])
        if is_information_schema(database):
            continue

        table_name = f"{database}.{table}"
        if is_skipped(table_name, skip_tables) or not matches_any(table_name, patterns):
            continue

        if suffix == STATEMENT_SUFFIX:
            table_metadata = _table_from_statement_file(
                file_path, metadata_path, names, database, table, embedded_backup_disk
            )
        else:
            table_metadata = TableMetadata.model_validate_json(file_path.read_bytes())

        filter_parts_by_partitions(table_metadata, partitions)
        merge_table(result, table_metadata)

    sort_tables(result, drop)
    logger.debug(f"local catalog of {metadata_path}: {len(result)} tables")
    return result


async def _read_object(storage: RemoteStorage, key: str) -> bytes:
    reader = await storage.get_file_reader(key)
    try:
        return await reader.read()
    finally:
        await reader.close()


async def read_backup_metadata(storage: RemoteStorage, backup_name: str) -> BackupMetadata:
    """Fetch and decode ``<backup_name>/metadata.json``."""
    data = await _read_object(storage, f"{backup_name}/metadata.json")
    return BackupMetadata.model_validate_json(data)


async def get_table_list_remote(
    storage: RemoteStorage,
    backup_metadata: BackupMetadata,
    table_pattern: str,
    drop: bool,
    partitions: set[str] | None = None,
    *,
    skip_tables: Sequence[str] = (),
    cancel: asyncio.Event | None = None,
) -> list[TableMetadata]:
    """Build the catalog of an uploaded backup from its manifest.

    For each manifest entry the include patterns are tried in order; the
    first matching pattern fetches the table's sidecar and no further
    patterns are tried for that entry. ``cancel`` is checked before every
    pattern attempt.

    Args:
        storage: Remote storage holding the backup.
        backup_metadata: The backup manifest.
        table_pattern: Comma-separated include globs (empty means all).
        drop: Order for dropping (True) or creating (False).
        partitions: Partition ids to keep (empty or None means all).
        skip_tables: Globs of tables to exclude even when included.
        cancel: Set by the caller to abort the build.

    Returns:
        Deduplicated catalog in safe processing order.

    Raises:
        CatalogBuildCancelled: If ``cancel`` was set during the build.
        OSError: If a sidecar cannot be read.
        pydantic.ValidationError: If a sidecar is malformed.
    """
    patterns = split_table_patterns(table_pattern)
    metadata_path = f"{backup_metadata.backup_name}/metadata"
    result: list[TableMetadata] = []

    for title in backup_metadata.tables:
        if is_information_schema(title.database):
            continue
        table_name = title.full_name
        skipped = is_skipped(table_name, skip_tables)

        for pattern in patterns:
            if cancel is not None and cancel.is_set():
                raise CatalogBuildCancelled(
                    f"catalog build of {backup_metadata.backup_name} cancelled"
                )
            if skipped or not matches_any(table_name, [pattern]):
                continue
            key = (
                f"{metadata_path}/{table_path_encode(title.database)}/"
                f"{table_path_encode(title.table)}{SIDECAR_SUFFIX}"
            )
            table_metadata = TableMetadata.model_validate_json(await _read_object(storage, key))
            filter_parts_by_partitions(table_metadata, partitions)
            merge_table(result, table_metadata)
            break

    sort_tables(result, drop)
    logger.debug(f"remote catalog of {backup_metadata.backup_name}: {len(result)} tables")
    return result
