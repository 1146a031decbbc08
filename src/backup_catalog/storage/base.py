"""Remote storage protocol consumed by the catalog builder.

Only the read side is needed to assemble a catalog: the builder opens one
object per table and reads it fully.

Usage:
    from backup_catalog.storage.base import RemoteStorage

    async def read_all(storage: RemoteStorage, key: str) -> bytes:
        reader = await storage.get_file_reader(key)
        try:
            return await reader.read()
        finally:
            await reader.close()
"""

from typing import Protocol


class ObjectReader(Protocol):
    """An open remote object. Callers must ``close()`` it."""

    async def read(self) -> bytes:
        """Read the remaining object body."""
        ...

    async def close(self) -> None:
        ...


class RemoteStorage(Protocol):
    """Object storage holding uploaded backups."""

    async def get_file_reader(self, key: str) -> ObjectReader:
        """Open the object at ``key`` (slash-separated, relative to the bucket root).

        Raises:
            FileNotFoundError: If the object does not exist.
            OSError: For other transport failures.
        """
        ...
