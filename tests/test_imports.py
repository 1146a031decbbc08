"""Public API surface of the package."""

import importlib

import pytest

import backup_catalog


class TestPublicApi:
    def test_version(self) -> None:
        assert backup_catalog.__version__ == "0.1.0"

    @pytest.mark.parametrize("name", backup_catalog.__all__)
    def test_all_names_resolve(self, name: str) -> None:
        assert getattr(backup_catalog, name) is not None

    @pytest.mark.parametrize(
        "module",
        [
            "backup_catalog.catalog",
            "backup_catalog.config",
            "backup_catalog.storage",
            "backup_catalog.cli",
        ],
    )
    def test_subpackages_export_all(self, module: str) -> None:
        mod = importlib.import_module(module)
        for name in getattr(mod, "__all__", []):
            assert hasattr(mod, name), f"{module} is missing {name}"
