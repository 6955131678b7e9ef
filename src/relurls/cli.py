"""
relurls command line entry point.

Runs the rewrite over an already built output directory. Without --route,
the valid page routes are read from the output tree itself: every
<route>/index.html makes <route> a valid link target.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .core.controller import RelativeUrlsController
from .core.logger import initialize_logging
from .exceptions import ConfigurationError
from .utils.config import RewriteConfiguration, load_settings
from .utils.file_walker import list_files
from .utils.storage import LocalStorage, StorageBackend


def discover_routes(output_dir: str, storage: StorageBackend) -> List[str]:
    """Routes of the pages found in the output tree, e.g. ['about', 'blog/post-1']."""
    suffix = '/index.html'
    return [f[:-len(suffix)] for f in list_files(output_dir, storage, extensions=[suffix])]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relurls",
        description="Rewrite site-rooted URLs in built HTML files into relative paths.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    relurls dist                                  # Routes taken from dist/*/index.html
    relurls dist --route about --route blog       # Explicit page routes
    relurls dist --config relurls.json --log-all-changes
        """
    )
    parser.add_argument("output_dir", help="Build output directory (e.g. 'dist')")
    parser.add_argument("--config", help="JSON settings file (logAllChanges, publicFolder, ...)")
    parser.add_argument("--public-folder", default=None,
                        help="Public folder, relative to the output directory (default: ../public)")
    parser.add_argument("--route", action="append", dest="routes", default=None,
                        help="Valid page route; repeat for several routes")
    parser.add_argument("--page-attr", action="append", dest="page_attrs", default=None,
                        help="Attribute searched for page links (default: href)")
    parser.add_argument("--asset-attr", action="append", dest="asset_attrs", default=None,
                        help="Attribute searched for asset URLs (default: src, href)")
    parser.add_argument("--log-all-changes", action="store_true", default=None,
                        help="Log every change, not only the per-file overview")
    parser.add_argument("--log-dir", default=None, help="Also write rotating log files here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output on the console")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = initialize_logging(args.log_dir, logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_settings(args.config) if args.config else {}
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    overrides = {
        'logAllChanges': args.log_all_changes,
        'publicFolder': args.public_folder,
        'pageLinkAttributesToChange': args.page_attrs,
        'assetAttributesToChange': args.asset_attrs,
    }
    config = RewriteConfiguration.from_mapping(settings).merged(overrides)

    output_dir = os.path.abspath(args.output_dir)
    if not os.path.isdir(output_dir):
        logger.error(f"Output directory not found: {output_dir}")
        return 2

    storage = LocalStorage()
    routes = args.routes if args.routes else discover_routes(output_dir, storage)
    pages = [{'pathname': r} for r in routes]

    controller = RelativeUrlsController(config, storage=storage, logger=logger)
    try:
        stats = controller.run(pages, output_dir)
    except OSError:
        # Already logged with its traceback by the controller's error tracker
        return 1

    logger.info(f"{stats['written']}/{stats['html_files']} files rewritten, "
                f"{stats['rewrites']} URLs relativized, {stats['inlines']} scripts inlined")
    return 0


if __name__ == "__main__":
    sys.exit(main())
