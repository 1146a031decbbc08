"""``RemoteStorage`` backed by a local directory.

Mirrors the bucket layout on disk, which is how backups are laid out when
the remote storage is a mounted filesystem.
"""

import asyncio
from pathlib import Path
from typing import BinaryIO


class LocalFileReader:
    """Async wrapper around a binary file handle."""

    def __init__(self, handle: BinaryIO):
        self._handle = handle

    async def read(self) -> bytes:
        return await asyncio.to_thread(self._handle.read)

    async def close(self) -> None:
        self._handle.close()


class LocalStorage:
    """Serve object keys from files below ``root``."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _resolve(self, key: str) -> Path:
        path = (self.root / key.lstrip("/")).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise ValueError(f"Object key escapes storage root: {key}")
        return path

    async def get_file_reader(self, key: str) -> LocalFileReader:
        path = self._resolve(key)
        handle = await asyncio.to_thread(open, path, "rb")
        return LocalFileReader(handle)
