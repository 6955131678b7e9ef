"""
Asset discovery for the rewrite passes.

Finds the files a build copied from the public folder and the files the
bundler emitted into its output directory (``_astro`` by default). Both are
meant to be discovered once per run and shared by every HTML file.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..utils.file_walker import list_files
from ..utils.storage import StorageBackend


BUNDLER_DIR_PREFIX = "_astro"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BundlerAssetIndex:
    path: str               # Directory path inside the output root
    name: str               # Directory basename, e.g. '_astro'
    files: Tuple[str, ...]  # Forward-slash paths relative to the directory

    def site_paths(self) -> List[str]:
        """Site-rooted paths without the leading slash ('_astro/main.js')."""
        return [f"{self.name}/{f}" for f in self.files]


def find_bundler_dir(output_root: str, storage: StorageBackend,
                     prefix: str = BUNDLER_DIR_PREFIX) -> Optional[str]:
    """Return the first immediate child directory whose name starts with prefix."""
    for name in storage.list_directory(output_root):
        if not name.startswith(prefix):
            continue
        candidate = os.path.join(output_root, name)
        if storage.path_info(candidate).is_directory:
            return candidate
    return None


def discover_bundler_assets(output_root: str, storage: StorageBackend,
                            prefix: str = BUNDLER_DIR_PREFIX) -> Optional[BundlerAssetIndex]:
    """
    Index the bundler output directory.

    Returns None when the build has no bundler directory; that simply means
    there is nothing for the bundler-asset pass to rewrite.
    """
    bundler_dir = find_bundler_dir(output_root, storage, prefix)
    if bundler_dir is None:
        logger.debug(f"No '{prefix}*' directory in {output_root}")
        return None
    files = tuple(list_files(bundler_dir, storage))
    logger.debug(f"Found {len(files)} bundler assets in {bundler_dir}")
    return BundlerAssetIndex(path=bundler_dir, name=os.path.basename(bundler_dir), files=files)


def discover_public_assets(public_dir: str, storage: StorageBackend) -> List[str]:
    """List the public folder; a missing folder means no public assets."""
    if not storage.exists(public_dir):
        logger.debug(f"Public folder not found, skipping public assets: {public_dir}")
        return []
    return list_files(public_dir, storage)
