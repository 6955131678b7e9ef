"""
relurls Orchestrator: runs one post-build rewrite over an output directory.

Files are processed serially in discovery order. Each HTML file goes through
page links, public assets, bundler assets and script inlining, and is only
written back when at least one change was made.
"""

from __future__ import annotations

import os
import time
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from .discovery import discover_bundler_assets, discover_public_assets
from .logger import ErrorTracker
from .rewriter import RewriteChange, RewriteChangeType, UrlRewriter
from ..utils.config import RewriteConfiguration
from ..utils.file_walker import list_files
from ..utils.storage import LocalStorage, StorageBackend


def _pathname(page: Any) -> str:
    if isinstance(page, dict):
        return page.get('pathname') or ''
    return getattr(page, 'pathname', '') or ''


def collect_valid_routes(pages: Optional[Iterable[Any]]) -> set:
    """Route strings without surrounding slashes, e.g. {'about', 'blog/post-1'}."""
    routes = set()
    for page in pages or []:
        route = _pathname(page)
        if route.endswith('/'):
            route = route[:-1]
        if route.startswith('/'):
            route = route[1:]
        routes.add(route)
    return routes


def output_dir_to_path(output_dir: Any) -> str:
    """Accept a path or a file:// URL for the output directory."""
    text = os.fspath(output_dir) if not isinstance(output_dir, str) else output_dir
    if text.startswith('file://'):
        parsed = urlparse(text)
        return url2pathname(unquote(parsed.path))
    return text


class RelativeUrlsController:
    def __init__(self, config: Optional[RewriteConfiguration] = None,
                 storage: Optional[StorageBackend] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or RewriteConfiguration()
        self.storage = storage or LocalStorage()
        self.logger = logger or logging.getLogger(__name__)
        self.tracker = ErrorTracker(self.logger)
        self.rewriter = UrlRewriter(self.storage, self.logger)

    def run(self, pages, output_dir, asset_manifest=None, public_dir: Optional[str] = None,
            progress: Optional[Callable[[object], None]] = None) -> Dict[str, int]:
        """
        Rewrite every HTML file under output_dir.

        Args:
            pages: Page descriptors with a 'pathname'
            output_dir: Output root (path or file:// URL)
            asset_manifest: Host asset manifest; only its size is reported
            public_dir: Public folder root; defaults to config.public_folder
                        resolved against output_dir
            progress: Optional callback receiving progress dicts

        Returns:
            Run statistics

        Raises:
            OSError: storage failures abort the run; files already written stay written
        """
        stats = {"html_files": 0, "written": 0, "changes": 0, "rewrites": 0,
                 "inlines": 0, "warnings": 0, "elapsed_ms": 0}
        config = self.config
        dist_dir = output_dir_to_path(output_dir)

        self.logger.info("Running post-build link and asset rewrites")
        if asset_manifest:
            self.logger.debug(f"Host reported {len(asset_manifest)} asset entries")

        valid_routes = collect_valid_routes(pages)

        try:
            html_files = list_files(dist_dir, self.storage, extensions=['.html'])
            if public_dir is None:
                public_dir = self.storage.resolve(dist_dir, config.public_folder)
            asset_paths = discover_public_assets(public_dir, self.storage)
            bundler_index = discover_bundler_assets(dist_dir, self.storage)
        except OSError as e:
            self.tracker.log_error(e, context="asset discovery", path=dist_dir)
            raise

        stats["html_files"] = len(html_files)
        if not html_files:
            self.tracker.log_warning(f"No HTML files found in {dist_dir}")
        if progress:
            progress({"type": "discovery", "total": len(html_files), "public_assets": len(asset_paths),
                      "bundler_assets": len(bundler_index.files) if bundler_index else 0})

        self.rewriter.missing_scripts = []
        total_ms = 0
        for idx, file_rel in enumerate(html_files, 1):
            file_path = os.path.join(dist_dir, file_rel)
            try:
                changes, elapsed_ms, written = self._process_file(
                    file_path, dist_dir, valid_routes, asset_paths, bundler_index)
            except OSError as e:
                self.tracker.log_error(e, context="rewrite", path=file_path)
                raise
            total_ms += elapsed_ms

            self.logger.info(f"▶ /{file_rel} (+{elapsed_ms}ms) ({idx}/{len(html_files)})")
            if written:
                stats["written"] += 1
            for change in changes:
                stats["changes"] += 1
                if change.type is RewriteChangeType.INLINE:
                    stats["inlines"] += 1
                else:
                    stats["rewrites"] += 1
                if config.log_all_changes:
                    self.logger.info(f"    {change.from_} → {change.to}")
            if progress:
                progress({"type": "file", "index": idx, "file": file_rel,
                          "changes": len(changes), "written": written})

        stats["warnings"] = len(self.rewriter.missing_scripts)
        stats["elapsed_ms"] = total_ms
        self.logger.info(f"✓ Completed in {total_ms}ms")
        if progress:
            progress({"type": "counters", "stats": stats})
        return stats

    def _process_file(self, file_path, dist_dir, valid_routes, asset_paths, bundler_index):
        """Run all passes on one file; returns (changes, elapsed_ms, written)."""
        config = self.config
        rewriter = self.rewriter
        file_dir = os.path.dirname(file_path)
        changes: List[RewriteChange] = []

        html = self.storage.read_file(file_path)
        start = time.perf_counter()

        if config.page_link_attributes_to_change:
            html = rewriter.rewrite_page_links(html, config.page_link_attributes_to_change, valid_routes,
                                               file_dir, file_path, dist_dir, changes)
        if config.asset_attributes_to_change:
            html = rewriter.rewrite_public_assets(html, config.asset_attributes_to_change, asset_paths,
                                                  file_path, file_dir, dist_dir, changes)
            if bundler_index is not None:
                html = rewriter.rewrite_astro_assets(html, config.asset_attributes_to_change, file_path,
                                                     file_dir, dist_dir, changes, bundler_index=bundler_index)
        html = rewriter.inline_astro_scripts(html, file_dir, dist_dir, changes, file_path,
                                             bundler_index=bundler_index)

        elapsed_ms = round((time.perf_counter() - start) * 1000)
        written = bool(changes)
        if written:
            self.storage.write_file(file_path, html)
        return changes, elapsed_ms, written
