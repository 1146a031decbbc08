"""Configuration management: TOML loading and config models.

Usage:
    >>> from backup_catalog.config import load_catalog_config, CatalogConfig
"""

from backup_catalog.config.loader import load_catalog_config
from backup_catalog.config.models import CatalogConfig, ClickHouseConfig, GeneralConfig

__all__ = ["load_catalog_config", "CatalogConfig", "ClickHouseConfig", "GeneralConfig"]
