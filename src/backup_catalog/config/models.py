"""Pydantic models for catalog configuration."""

from pydantic import BaseModel, Field


class ClickHouseConfig(BaseModel):
    """``[clickhouse]`` section of backup-catalog.toml."""

    skip_tables: list[str] = Field(
        default_factory=lambda: [
            "system.*",
            "INFORMATION_SCHEMA.*",
            "information_schema.*",
            "_temporary_and_external_tables.*",
        ]
    )
    embedded_backup_disk: str = "default"  # disk label for parts of .sql captures


class GeneralConfig(BaseModel):
    """``[general]`` section of backup-catalog.toml."""

    log_level: str = "info"


class CatalogConfig(BaseModel):
    """Complete configuration from backup-catalog.toml."""

    clickhouse: ClickHouseConfig = Field(default_factory=ClickHouseConfig)
    general: GeneralConfig = Field(default_factory=GeneralConfig)
