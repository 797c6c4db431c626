"""
File store adapter for the serving directory.

All operations work on the direct children of a single directory. Blocking
filesystem calls are moved off the event loop with ``asyncio.to_thread``.
Names passed to ``read``/``write`` must already be approved by
``validate_filename``.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


def _is_text_name(name: str) -> bool:
    """Names with undecodable bytes come back from os.listdir as surrogates."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class FileStore:
    """List, read and write files in one flat directory."""

    def __init__(self, root: Union[str, Path]):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> Path:
        """Create the serving directory if missing and return its absolute path."""
        self._root.mkdir(parents=True, exist_ok=True)
        try:
            return self._root.resolve()
        except OSError:
            return self._root

    def _path_for(self, name: str) -> Path:
        return self._root / name

    def _list_sync(self) -> List[str]:
        names = []
        with os.scandir(self._root) as entries:
            for entry in entries:
                if _is_text_name(entry.name):
                    names.append(entry.name)
                else:
                    logger.debug("Skipping non-text directory entry %r", entry.name)
        return names

    def _read_sync(self, name: str) -> bytes:
        path = self._path_for(name)
        if path.is_dir():
            raise FileNotFoundError(f"'{name}' is a directory")
        return path.read_bytes()

    def _write_sync(self, name: str, data: bytes) -> int:
        with open(self._path_for(name), "wb") as f:
            f.write(data)
        return len(data)

    async def list(self) -> List[str]:
        """Return the names of the root's direct children, unsorted.

        Raises:
            OSError: If the directory cannot be enumerated.
        """
        return await asyncio.to_thread(self._list_sync)

    async def read(self, name: str) -> bytes:
        """Return the bytes of ``name``.

        Raises:
            FileNotFoundError: If there is no such file.
            OSError: On any other read failure.
        """
        return await asyncio.to_thread(self._read_sync, name)

    async def write(self, name: str, data: bytes) -> int:
        """Create or replace ``name`` with ``data`` and return the byte count.

        Concurrent writers to the same name are not serialized; the last
        completed write wins.

        Raises:
            OSError: If the file cannot be created or written.
        """
        return await asyncio.to_thread(self._write_sync, name, data)
