"""
Storage Backends

This module defines the storage capability set the rewrite engine works
through, and the local disk implementation used for real builds. The engine
never touches the filesystem directly, so an in-memory tree can stand in for
tests (see memory_storage).
"""

import os
import stat
import logging
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class PathInfo:
    is_file: bool
    is_directory: bool


class StorageBackend:
    """
    Capability set consumed by the walker, discovery and rewrite passes.

    Every method raises the built-in OSError family (FileNotFoundError,
    NotADirectoryError, IsADirectoryError) on structural failures; callers
    let those propagate.
    """

    def list_directory(self, path: str) -> List[str]:
        raise NotImplementedError

    def read_file(self, path: str) -> str:
        raise NotImplementedError

    def write_file(self, path: str, content: str) -> None:
        raise NotImplementedError

    def delete_file(self, path: str) -> None:
        raise NotImplementedError

    def path_info(self, path: str) -> PathInfo:
        raise NotImplementedError

    def remove_directory(self, path: str) -> None:
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def resolve(self, *segments: str) -> str:
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """
    Local disk storage. Text is read and written as UTF-8.
    """

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding
        self.logger = logging.getLogger(__name__)

    def list_directory(self, path: str) -> List[str]:
        return os.listdir(path)

    def read_file(self, path: str) -> str:
        # newline='' keeps the document's own line endings intact
        with open(path, 'r', encoding=self.encoding, newline='') as f:
            return f.read()

    def write_file(self, path: str, content: str) -> None:
        with open(path, 'w', encoding=self.encoding, newline='') as f:
            f.write(content)
        self.logger.debug(f"Saved {len(content)} chars: {path}")

    def delete_file(self, path: str) -> None:
        os.remove(path)

    def path_info(self, path: str) -> PathInfo:
        mode = os.stat(path).st_mode
        return PathInfo(is_file=stat.S_ISREG(mode), is_directory=stat.S_ISDIR(mode))

    def remove_directory(self, path: str) -> None:
        os.rmdir(path)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def resolve(self, *segments: str) -> str:
        return os.path.abspath(os.path.join(*segments))
