"""
relurls: Post-build Relative URL Rewriter

A utility for rewriting the site-rooted URLs in a static site generator's
build output (page links, public-folder assets and bundler-processed assets)
into directory-relative paths, and for inlining bundled module scripts, so
the output works from any subdirectory or straight from disk.
"""

__version__ = "1.0"
__author__ = "relurls Project"
__description__ = "Post-build Relative URL Rewriter"


def run(pages, output_dir, asset_manifest=None, logger=None, storage=None,
        configuration=None, public_dir=None):
    """
    Rewrite one build's output directory in place.

    Args:
        pages: Page route descriptors, each a mapping or object with a ``pathname``
        output_dir: Build output root (path string or ``file://`` URL)
        asset_manifest: Host asset manifest (optional, reported only)
        logger: Logger used for progress and missing-script warnings
        storage: Storage backend (defaults to the local disk)
        configuration: Mapping or RewriteConfiguration (defaults apply)
        public_dir: Explicit public folder root (overrides ``publicFolder``)

    Returns:
        Dictionary of run statistics
    """
    from .core.controller import RelativeUrlsController
    from .utils.config import RewriteConfiguration

    if not isinstance(configuration, RewriteConfiguration):
        configuration = RewriteConfiguration.from_mapping(configuration)

    controller = RelativeUrlsController(configuration, storage=storage, logger=logger)
    return controller.run(pages, output_dir, asset_manifest=asset_manifest, public_dir=public_dir)
