"""Backup metadata models.

``TableMetadata`` mirrors the per-table JSON sidecar written next to every
table in a backup; ``BackupMetadata`` is the backup-level manifest that
lists which tables a backup contains.

Usage:
    from backup_catalog.catalog.models import TableMetadata, Part

    table = TableMetadata(
        database="default",
        table="events",
        query="CREATE TABLE default.events (...) ENGINE = MergeTree ORDER BY id",
        parts={"default": [Part(name="202401_1_1_0")]},
    )
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Part(BaseModel):
    """A single data part directory on one disk."""

    model_config = ConfigDict(extra="ignore")

    name: str
    required: bool = False
    rebalanced_disk: str = ""


class TableMetadata(BaseModel):
    """One table, view, dictionary or function captured in a backup."""

    model_config = ConfigDict(extra="ignore")

    database: str = ""
    table: str
    query: str = ""                                             # CREATE/ATTACH statement
    parts: dict[str, list[Part]] = Field(default_factory=dict)  # disk name -> parts
    files: dict[str, list[str]] = Field(default_factory=dict)
    size: dict[str, int] = Field(default_factory=dict)
    total_bytes: int = 0
    dependencies_table: str = ""
    dependencies_database: str = ""
    metadata_only: bool = False

    # the backup tool writes empty maps and slices as JSON null
    @field_validator("parts", "files", "size", mode="before")
    @classmethod
    def _null_map_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("parts", "files", mode="before")
    @classmethod
    def _null_list_as_empty(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {k: [] if items is None else items for k, items in v.items()}
        return v

    @property
    def full_name(self) -> str:
        """Dotted ``database.table`` identity used for pattern matching."""
        return f"{self.database}.{self.table}"


class TableTitle(BaseModel):
    """Identity pair of a table listed in a backup manifest."""

    database: str
    table: str

    @property
    def full_name(self) -> str:
        return f"{self.database}.{self.table}"


class BackupMetadata(BaseModel):
    """Backup manifest stored as ``<backup_name>/metadata.json``."""

    model_config = ConfigDict(extra="ignore")

    backup_name: str
    tables: list[TableTitle] = Field(default_factory=list)
    disks: dict[str, str] = Field(default_factory=dict)
    clickhouse_version: str = ""
    creation_date: str = ""
    data_format: str = ""

    @field_validator("tables", mode="before")
    @classmethod
    def _null_tables_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("disks", mode="before")
    @classmethod
    def _null_disks_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v
