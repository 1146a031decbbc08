"""TOML configuration loader."""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from backup_catalog.config.models import CatalogConfig

DEFAULT_CONFIG_NAME = "backup-catalog.toml"


def load_catalog_config(config_path: Path | None = None) -> CatalogConfig:
    """Load catalog configuration from a TOML file.

    Args:
        config_path: Path to the config file. When ``None``, uses
            ``backup-catalog.toml`` in the current working directory and
            falls back to defaults if that file does not exist.

    Returns:
        CatalogConfig with defaults filled in.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` doesn't exist.
        ValueError: If the file is not valid TOML or has an invalid shape.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return CatalogConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Catalog config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return CatalogConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ValueError(f"Invalid catalog config {config_path}: {e}") from e
