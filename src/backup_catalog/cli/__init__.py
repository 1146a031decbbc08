"""Command line front-end for inspecting backup catalogs.

Usage:
    backup-catalog tables /var/lib/clickhouse/backup/daily/metadata --tables "default.*"
    backup-catalog tables ./daily/metadata --partitions 202401,202402 --drop
    backup-catalog tables ./daily/metadata --restore-database-mapping prod:staging
    backup-catalog remote-tables /mnt/bucket daily --tables "logs.*"
    backup-catalog download-list /mnt/bucket daily --tables "logs.*"

Commands:
    tables         - Build the catalog of a local backup
    remote-tables  - Build the catalog of an uploaded backup from its manifest
    download-list  - Show which manifest tables a pattern selects
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from backup_catalog.catalog.builder import (
    get_table_list_local,
    get_table_list_remote,
    read_backup_metadata,
)
from backup_catalog.catalog.errors import CatalogError
from backup_catalog.catalog.models import TableMetadata
from backup_catalog.catalog.ordering import engine_priority
from backup_catalog.catalog.partitions import parse_partitions
from backup_catalog.catalog.patterns import filter_tables_for_download
from backup_catalog.catalog.remap import change_database, parse_database_mapping
from backup_catalog.config.loader import load_catalog_config
from backup_catalog.config.models import CatalogConfig
from backup_catalog.storage.local import LocalStorage

console = Console()

_CLI_ERRORS = (CatalogError, OSError, ValueError, ValidationError)


# ============================================================================
# Helpers
# ============================================================================


def _load_config(args: argparse.Namespace) -> CatalogConfig:
    """Load config and configure logging from it (``--log-level`` wins)."""
    config = load_catalog_config(Path(args.config) if args.config else None)
    level = (args.log_level or config.general.log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


def _print_catalog(tables: list[TableMetadata], drop: bool) -> None:
    """Render a catalog as a rich table in processing order."""
    table = Table(title=f"{'Drop' if drop else 'Create'} order ({len(tables)} tables)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Priority", justify="right")
    table.add_column("Database", style="cyan")
    table.add_column("Table", style="cyan")
    table.add_column("Parts")

    for i, t in enumerate(tables, start=1):
        parts = ", ".join(f"{disk}={len(p)}" for disk, p in t.parts.items()) or "-"
        table.add_row(
            str(i),
            str(engine_priority(t.query, drop)),
            escape(t.database),
            escape(t.table),
            parts,
        )
    console.print(table)


def _apply_mapping(tables: list[TableMetadata], mapping: list[str] | None) -> None:
    rule = parse_database_mapping(mapping)
    if rule:
        change_database(tables, rule)


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_remote_tables(args: argparse.Namespace, config: CatalogConfig) -> int:
    storage = LocalStorage(args.storage_root)
    backup_metadata = await read_backup_metadata(storage, args.backup_name)
    tables = await get_table_list_remote(
        storage,
        backup_metadata,
        args.tables,
        args.drop,
        parse_partitions(args.partitions),
        skip_tables=config.clickhouse.skip_tables,
    )
    _apply_mapping(tables, args.restore_database_mapping)
    _print_catalog(tables, args.drop)
    return 0


async def _async_download_list(args: argparse.Namespace) -> int:
    storage = LocalStorage(args.storage_root)
    backup_metadata = await read_backup_metadata(storage, args.backup_name)
    for title in filter_tables_for_download(backup_metadata.tables, args.tables):
        console.print(escape(title.full_name))
    return 0


# ============================================================================
# Sync wrappers (called by argparse)
# ============================================================================


def cmd_tables(args: argparse.Namespace) -> int:
    """Build and print the catalog of a local backup.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        config = _load_config(args)
        tables = get_table_list_local(
            args.metadata_path,
            args.tables,
            args.drop,
            parse_partitions(args.partitions),
            skip_tables=config.clickhouse.skip_tables,
            embedded_backup_disk=config.clickhouse.embedded_backup_disk,
        )
        _apply_mapping(tables, args.restore_database_mapping)
    except _CLI_ERRORS as e:
        console.print(f"[bold red]x[/bold red] {escape(str(e))}")
        return 1

    _print_catalog(tables, args.drop)
    return 0


def cmd_remote_tables(args: argparse.Namespace) -> int:
    """Build and print the catalog of an uploaded backup.

    Wraps the async implementation with ``asyncio.run()``.
    """
    try:
        config = _load_config(args)
        return asyncio.run(_async_remote_tables(args, config))
    except _CLI_ERRORS as e:
        console.print(f"[bold red]x[/bold red] {escape(str(e))}")
        return 1


def cmd_download_list(args: argparse.Namespace) -> int:
    """Print the manifest tables selected by ``--tables``."""
    try:
        _load_config(args)
        return asyncio.run(_async_download_list(args))
    except _CLI_ERRORS as e:
        console.print(f"[bold red]x[/bold red] {escape(str(e))}")
        return 1


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="backup-catalog",
        description="Inspect the table catalog of ClickHouse backups",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to backup-catalog.toml (default: ./backup-catalog.toml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (debug, info, warning, error)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_selection_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--tables",
            "-t",
            default="",
            help="Comma-separated database.table globs (e.g., 'default.*,logs.events')",
        )
        p.add_argument(
            "--partitions",
            action="append",
            default=None,
            help="Comma-separated partition ids to keep (repeatable)",
        )
        p.add_argument(
            "--drop",
            action="store_true",
            help="Order tables for dropping instead of creating",
        )
        p.add_argument(
            "--restore-database-mapping",
            "-m",
            action="append",
            default=None,
            help="Rewrite database names, 'source:target' (repeatable)",
        )

    # tables command
    p_tables = subparsers.add_parser(
        "tables",
        help="Build the catalog of a local backup",
    )
    p_tables.add_argument("metadata_path", help="The backup's metadata directory")
    _add_selection_args(p_tables)
    p_tables.set_defaults(func=cmd_tables)

    # remote-tables command
    p_remote = subparsers.add_parser(
        "remote-tables",
        help="Build the catalog of an uploaded backup from its manifest",
    )
    p_remote.add_argument("storage_root", help="Directory mirroring the bucket root")
    p_remote.add_argument("backup_name", help="Backup name")
    _add_selection_args(p_remote)
    p_remote.set_defaults(func=cmd_remote_tables)

    # download-list command
    p_download = subparsers.add_parser(
        "download-list",
        help="Show which manifest tables a pattern selects",
    )
    p_download.add_argument("storage_root", help="Directory mirroring the bucket root")
    p_download.add_argument("backup_name", help="Backup name")
    p_download.add_argument(
        "--tables",
        "-t",
        default="",
        help="Comma-separated database.table globs",
    )
    p_download.set_defaults(func=cmd_download_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
