"""Storage collaborators used by the catalog builder.

Usage:
    from backup_catalog.storage import LocalStorage, RemoteStorage
"""

from backup_catalog.storage.base import ObjectReader, RemoteStorage
from backup_catalog.storage.local import LocalFileReader, LocalStorage

__all__ = [
    "ObjectReader",
    "RemoteStorage",
    "LocalFileReader",
    "LocalStorage",
]
