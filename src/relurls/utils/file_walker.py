"""
Recursive file listing over a storage backend.
"""

import os
from typing import Iterable, List, Optional

from .storage import StorageBackend


def list_files(root: str,
               storage: StorageBackend,
               base_dir: Optional[str] = None,
               extensions: Optional[Iterable[str]] = None) -> List[str]:
    """
    Recursively list files under a directory.

    Args:
        root: Directory to scan
        storage: Storage backend to list through
        base_dir: Directory the returned paths are relative to (default: root)
        extensions: Optional suffixes to keep (e.g. ['.html']); plain suffix match

    Returns:
        Forward-slash paths relative to base_dir, in storage listing order
    """
    if base_dir is None:
        base_dir = root
    suffixes = tuple(extensions) if extensions else None

    results: List[str] = []
    for name in storage.list_directory(root):
        full_path = os.path.join(root, name)
        if storage.path_info(full_path).is_directory:
            results.extend(list_files(full_path, storage, base_dir, suffixes))
            continue
        rel = os.path.relpath(full_path, base_dir).replace(os.sep, '/')
        if suffixes is None or rel.endswith(suffixes):
            results.append(rel)
    return results
