"""Tests for TOML configuration loading."""

import textwrap
from pathlib import Path

import pytest

from backup_catalog.config.loader import load_catalog_config
from backup_catalog.config.models import CatalogConfig


class TestLoadCatalogConfig:
    def test_load_valid_toml(self, tmp_path: Path) -> None:
        """All sections are parsed into their models."""
        config_file = tmp_path / "backup-catalog.toml"
        config_file.write_text(
            textwrap.dedent("""\
                [clickhouse]
                skip_tables = ["system.*", "tmp.*"]
                embedded_backup_disk = "backups"

                [general]
                log_level = "debug"
            """)
        )

        config = load_catalog_config(config_path=config_file)

        assert isinstance(config, CatalogConfig)
        assert config.clickhouse.skip_tables == ["system.*", "tmp.*"]
        assert config.clickhouse.embedded_backup_disk == "backups"
        assert config.general.log_level == "debug"

    def test_missing_sections_use_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "backup-catalog.toml"
        config_file.write_text("[general]\nlog_level = 'warning'\n")

        config = load_catalog_config(config_path=config_file)

        assert "system.*" in config.clickhouse.skip_tables
        assert config.clickhouse.embedded_backup_disk == "default"

    def test_explicit_missing_file_raises(self) -> None:
        with pytest.raises(FileNotFoundError, match="Catalog config not found"):
            load_catalog_config(config_path=Path("/nonexistent/backup-catalog.toml"))

    def test_default_path_without_file_gives_defaults(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert load_catalog_config() == CatalogConfig()

    def test_default_path_uses_cwd(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        (tmp_path / "backup-catalog.toml").write_text(
            "[clickhouse]\nembedded_backup_disk = 's3'\n"
        )
        monkeypatch.chdir(tmp_path)
        assert load_catalog_config().clickhouse.embedded_backup_disk == "s3"

    def test_invalid_toml_raises_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "backup-catalog.toml"
        config_file.write_text("[clickhouse\n")
        with pytest.raises(ValueError, match="Invalid catalog config"):
            load_catalog_config(config_path=config_file)

    def test_invalid_shape_raises_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "backup-catalog.toml"
        config_file.write_text("[clickhouse]\nskip_tables = 5\n")
        with pytest.raises(ValueError, match="Invalid catalog config"):
            load_catalog_config(config_path=config_file)
