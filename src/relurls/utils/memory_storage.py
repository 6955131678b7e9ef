"""
In-memory storage tree.

An explicit tree keyed by path segments that exposes exactly the storage
capability set. Every node is owned by a single parent directory; clone()
makes a deep structural copy so fixtures built from one tree never share
nodes.
"""

from __future__ import annotations

import errno
import posixpath
from typing import Dict, List, Optional, Union

from .storage import PathInfo, StorageBackend


class MemoryFile:
    def __init__(self, content: str = ""):
        self.content = content


class MemoryDirectory:
    def __init__(self, children: Optional[Dict[str, Node]] = None):
        self.children: Dict[str, Node] = dict(children or {})

    def copy(self) -> MemoryDirectory:
        clone = MemoryDirectory()
        for name, child in self.children.items():
            if isinstance(child, MemoryDirectory):
                clone.children[name] = child.copy()
            else:
                clone.children[name] = MemoryFile(child.content)
        return clone


Node = Union[MemoryFile, MemoryDirectory]


def _split(path: str) -> List[str]:
    """Split a path into segments. Relative paths are taken from the root."""
    path = path.replace('\\', '/')
    if not path.startswith('/'):
        path = '/' + path
    return [part for part in posixpath.normpath(path).split('/') if part]


class MemoryStorage(StorageBackend):
    """
    Storage backend over an in-memory tree rooted at ``/``.

    Example:
        storage = MemoryStorage()
        storage.add_file('/dist/index.html', '<a href="/">Home</a>')
        storage.list_directory('/dist')  # ['index.html']
    """

    def __init__(self, root: Optional[MemoryDirectory] = None):
        self.root = root if root is not None else MemoryDirectory()

    def clone(self) -> MemoryStorage:
        return MemoryStorage(self.root.copy())

    # Fixture helpers

    def make_dirs(self, path: str) -> MemoryDirectory:
        current = self.root
        for part in _split(path):
            child = current.children.get(part)
            if child is None:
                child = MemoryDirectory()
                current.children[part] = child
            elif not isinstance(child, MemoryDirectory):
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            current = child
        return current

    def add_file(self, path: str, content: str = "") -> None:
        parts = _split(path)
        parent = self.make_dirs('/'.join(parts[:-1]))
        parent.children[parts[-1]] = MemoryFile(content)

    # Capability set

    def _node(self, path: str) -> Node:
        current: Node = self.root
        for part in _split(path):
            if not isinstance(current, MemoryDirectory):
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            child = current.children.get(part)
            if child is None:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
            current = child
        return current

    def _parent_and_name(self, path: str):
        parts = _split(path)
        if not parts:
            raise PermissionError(errno.EPERM, "Cannot modify the storage root", path)
        parent = self._node('/'.join(parts[:-1]))
        if not isinstance(parent, MemoryDirectory):
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
        return parent, parts[-1]

    def list_directory(self, path: str) -> List[str]:
        node = self._node(path)
        if not isinstance(node, MemoryDirectory):
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
        return list(node.children)

    def read_file(self, path: str) -> str:
        node = self._node(path)
        if not isinstance(node, MemoryFile):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
        return node.content

    def write_file(self, path: str, content: str) -> None:
        parent, name = self._parent_and_name(path)
        if isinstance(parent.children.get(name), MemoryDirectory):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
        parent.children[name] = MemoryFile(content)

    def delete_file(self, path: str) -> None:
        parent, name = self._parent_and_name(path)
        node = parent.children.get(name)
        if node is None:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        if isinstance(node, MemoryDirectory):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
        del parent.children[name]

    def path_info(self, path: str) -> PathInfo:
        node = self._node(path)
        return PathInfo(is_file=isinstance(node, MemoryFile),
                        is_directory=isinstance(node, MemoryDirectory))

    def remove_directory(self, path: str) -> None:
        parent, name = self._parent_and_name(path)
        node = parent.children.get(name)
        if node is None:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        if not isinstance(node, MemoryDirectory):
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
        if node.children:
            raise OSError(errno.ENOTEMPTY, "Directory not empty", path)
        del parent.children[name]

    def exists(self, path: str) -> bool:
        try:
            self._node(path)
        except OSError:
            return False
        return True

    def resolve(self, *segments: str) -> str:
        return '/' + '/'.join(_split(posixpath.join(*(s.replace('\\', '/') for s in segments))))
