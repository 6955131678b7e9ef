"""
Shared fixtures: an in-memory build output tree modelled on a small Astro site.

    public/               dist/
    ├─ img.jpg            ├─ index.html, blog/index.html, about/index.html
    ├─ favicon.svg        ├─ img.jpg, favicon.svg, favicon.ico, stuff.js
    └─ favicon.ico        └─ _astro/ main.css, main.js, logo.png, hero.jpg
"""

import re
import sys
from pathlib import Path

import pytest

# Add the src directory to the path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from relurls.utils.memory_storage import MemoryStorage


MAIN_JS = 'console.log("astro")'

PAGE_LINK_HTML = """<a href="/">Home</a>
<div>
  <h1>Test</h1>
  <h6 data-url="/">This is a test page.</h6>
  <a href="/unknown">About</a>
  <p data-url="/blog">Lorem ipsum dolor sit amet.</p>
  <a href="/about">About</a>
</div>"""

PUBLIC_ASSET_HTML = """<html lang="de">
  <head>
    <meta charset="utf-8" />
    <link rel="icon" type="image/svg+xml" href="/favicon.svg" />
    <link rel="icon" href="/favicon.ico" />
  </head>
  <body>
    <p data-src="/img.jpg">Lorem ipsum dolor sit amet.</p>
    <img src="/unknown.jpg" alt="Test image" />
    <img src="/img.jpg" alt="Test image" />
  </body>
</html>"""

ASTRO_ASSET_HTML = """<div>
  <link href="/_astro/main.css" rel="stylesheet" />
  <img src="/_astro/logo.png" alt="Logo" />
  <p data-url="/_astro/main.css">Lorem ipsum dolor sit amet.</p>
  <script src="/_astro/main.js"></script>
</div>"""

INLINE_SCRIPT_HTML = """<div>
  <script type="module" src="/_astro/main.js"></script>
  <script type="module" src="/stuff.js"></script>
  <script src="/_astro/main.js"></script>
</div>"""

COMBINED_HTML = "\n".join([PAGE_LINK_HTML, PUBLIC_ASSET_HTML, ASTRO_ASSET_HTML, INLINE_SCRIPT_HTML])

SITE_CONFIG = {
    'logAllChanges': True,
    'publicFolder': '../public',
    'pageLinkAttributesToChange': ['href', 'data-url'],
    'assetAttributesToChange': ['src', 'data-src', 'href', 'data-url'],
}


def normalize_html(html: str) -> str:
    """Collapse whitespace so documents compare independent of indentation."""
    return re.sub(r'\s+', ' ', html).strip()


class CountingStorage(MemoryStorage):
    """MemoryStorage that records every write."""

    def __init__(self, root=None):
        super().__init__(root)
        self.writes = []

    def write_file(self, path, content):
        self.writes.append(path)
        super().write_file(path, content)


def build_site(storage: MemoryStorage) -> MemoryStorage:
    for page in ('/dist/index.html', '/dist/blog/index.html', '/dist/about/index.html'):
        storage.add_file(page, COMBINED_HTML)
    storage.add_file('/dist/img.jpg', '<binary>')
    storage.add_file('/dist/stuff.js', 'console.log(stuff)')
    storage.add_file('/dist/favicon.svg', '<svg></svg>')
    storage.add_file('/dist/favicon.ico', '<binary>')
    storage.add_file('/dist/_astro/main.css', 'body { background: red }')
    storage.add_file('/dist/_astro/logo.png', '<binary>')
    storage.add_file('/dist/_astro/hero.jpg', '<binary>')
    storage.add_file('/dist/_astro/main.js', MAIN_JS)
    storage.add_file('/public/img.jpg', '<binary>')
    storage.add_file('/public/favicon.svg', '<svg></svg>')
    storage.add_file('/public/favicon.ico', '<binary>')
    return storage


@pytest.fixture
def site():
    return build_site(CountingStorage())


@pytest.fixture
def html_fixtures():
    return {
        'page_links': PAGE_LINK_HTML,
        'public_assets': PUBLIC_ASSET_HTML,
        'astro_assets': ASTRO_ASSET_HTML,
        'inline_scripts': INLINE_SCRIPT_HTML,
        'combined': COMBINED_HTML,
        'main_js': MAIN_JS,
    }


@pytest.fixture
def site_config():
    return dict(SITE_CONFIG)
