"""
URL rewrite passes.

Each pass takes one HTML document as text and returns the rewritten text,
appending a RewriteChange for every substitution it makes. Matching is done
with regular expressions over double-quoted attributes (``href="/about"``);
single-quoted or unquoted attributes are left alone. Build output from the
site generator always uses double quotes, so a DOM parser is not needed.

The passes must run in this order: page links, public assets, bundler
assets, script inlining. Inlining only recognizes ``src`` values that still
point at files on disk.
"""

from __future__ import annotations

import os
import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .discovery import BUNDLER_DIR_PREFIX, BundlerAssetIndex, discover_bundler_assets
from .relativizer import relativize
from ..utils.storage import StorageBackend


INLINED = "inlined"

MODULE_SCRIPT_RE = re.compile(r'<script\s+type="module"\s+src="([^"]+)"></script>')


class RewriteChangeType(str, Enum):
    REWRITE = "rewrite"
    INLINE = "inline"


@dataclass(frozen=True)
class RewriteChange:
    type: RewriteChangeType
    file: str      # HTML file the change was made in, relative to the output root
    from_: str     # Original URL
    to: str        # New URL, or INLINED


def _attr_group(attributes: Iterable[str]) -> str:
    # The lookbehind keeps 'href' from matching inside 'data-href'
    return r'(?<![\w-])(' + '|'.join(re.escape(a) for a in attributes) + ')'


def _rel_to_root(path: str, output_root: str) -> str:
    return os.path.relpath(path, output_root).replace(os.sep, '/')


class UrlRewriter:
    """
    Applies the rewrite passes to HTML documents of one build.

    Args:
        storage: Storage backend used to find bundler assets and read scripts
        logger: Receives a warning for every module script that cannot be found
    """

    def __init__(self, storage: StorageBackend, logger: Optional[logging.Logger] = None,
                 bundler_prefix: str = BUNDLER_DIR_PREFIX):
        self.storage = storage
        self.logger = logger or logging.getLogger(__name__)
        self.bundler_prefix = bundler_prefix
        self.missing_scripts: List[str] = []

    def rewrite_page_links(self, html: str, attributes: Sequence[str], valid_routes,
                           file_dir: str, file_path: str, output_root: str,
                           changes: List[RewriteChange]) -> str:
        """
        Rewrite links to known pages, e.g. href="/about" -> href="../about/index.html".

        Only exact route matches are rewritten; values holding a '#' never
        match, and '/' always points at the root index.html.
        """
        if not attributes:
            return html
        routes = set(valid_routes)
        file_rel = _rel_to_root(file_path, output_root)
        group = _attr_group(attributes)

        def repl_link(m):
            attr, href = m.group(1), m.group(2)
            clean = re.sub(r'^/|/$', '', href)
            if clean not in routes:
                return m.group(0)
            rel = relativize(file_dir, os.path.join(output_root, clean, 'index.html'))
            changes.append(RewriteChange(RewriteChangeType.REWRITE, file_rel, href, rel))
            return f'{attr}="{rel}"'

        def repl_root(m):
            attr = m.group(1)
            rel = relativize(file_dir, os.path.join(output_root, 'index.html'))
            changes.append(RewriteChange(RewriteChangeType.REWRITE, file_rel, '/', rel))
            return f'{attr}="{rel}"'

        html = re.sub(group + r'="(/[^"#]+)"', repl_link, html)
        return re.sub(group + r'="/"', repl_root, html)

    def rewrite_public_assets(self, html: str, attributes: Sequence[str], asset_paths: Iterable[str],
                              file_path: str, file_dir: str, output_root: str,
                              changes: List[RewriteChange]) -> str:
        """Rewrite exact references to public-folder files, e.g. src="/favicon.svg"."""
        if not attributes:
            return html
        file_rel = _rel_to_root(file_path, output_root)
        for asset in asset_paths:
            target = os.path.join(output_root, asset)
            html = self._rewrite_literal(html, attributes, asset, target, file_dir, file_rel, changes)
        return html

    def rewrite_astro_assets(self, html: str, attributes: Sequence[str], file_path: str,
                             file_dir: str, output_root: str, changes: List[RewriteChange],
                             bundler_index: Optional[BundlerAssetIndex] = None) -> str:
        """
        Rewrite references to bundler output, e.g. href="/_astro/main.css".

        The bundler directory is discovered here unless the caller already
        indexed it for the run. No bundler directory means nothing to do.
        """
        if not attributes:
            return html
        if bundler_index is None:
            bundler_index = discover_bundler_assets(output_root, self.storage, self.bundler_prefix)
            if bundler_index is None:
                return html
        file_rel = _rel_to_root(file_path, output_root)
        for rel_file in bundler_index.files:
            asset = f"{bundler_index.name}/{rel_file}"
            target = os.path.join(bundler_index.path, rel_file)
            html = self._rewrite_literal(html, attributes, asset, target, file_dir, file_rel, changes)
        return html

    def inline_astro_scripts(self, html: str, file_dir: str, output_root: str,
                             changes: List[RewriteChange], file_path: str,
                             bundler_index: Optional[BundlerAssetIndex] = None) -> str:
        """
        Replace <script type="module" src=".../_astro/x.js"></script> with the script's source.

        Only a src with a folder segment named exactly like the bundler
        directory qualifies ('_astro' unless bundler_index says otherwise).
        A script that cannot be found is reported through the logger and its
        tag is kept as it is. File contents are inserted verbatim.
        """
        file_rel = _rel_to_root(file_path, output_root)
        bundler_name = bundler_index.name if bundler_index is not None else self.bundler_prefix

        def repl(m):
            src = m.group(1)
            if bundler_name not in src.split('/')[:-1]:
                return m.group(0)

            if src.startswith('/'):
                abs_path = os.path.join(output_root, src.lstrip('/'))
            else:
                abs_path = os.path.normpath(os.path.join(file_dir, src))

            if not self.storage.exists(abs_path):
                self.logger.warning(f"[inline_astro_scripts] File not found: {abs_path}")
                self.missing_scripts.append(abs_path)
                return m.group(0)

            js = self.storage.read_file(abs_path)
            changes.append(RewriteChange(RewriteChangeType.INLINE, file_rel, src, INLINED))
            return f'<script type="module">\n{js}\n</script>'

        return MODULE_SCRIPT_RE.sub(repl, html)

    def _rewrite_literal(self, html, attributes, asset, target, file_dir, file_rel, changes):
        pattern = _attr_group(attributes) + '="/' + re.escape(asset) + '"'
        from_url = '/' + asset

        def repl(m):
            rel = relativize(file_dir, target)
            changes.append(RewriteChange(RewriteChangeType.REWRITE, file_rel, from_url, rel))
            return f'{m.group(1)}="{rel}"'

        return re.sub(pattern, repl, html)
