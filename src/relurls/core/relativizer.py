"""
Directory-relative path computation shared by every rewrite pass.
"""

import os


def relativize(from_dir: str, to_absolute_path: str) -> str:
    """
    Return the relative URL path from ``from_dir`` to ``to_absolute_path``.

    Separators are normalized to ``/`` for HTML and the result always starts
    with ``.`` so browsers never read it as a bare host-relative segment:

        relativize('/dist/blog', '/dist/index.html')       -> '../index.html'
        relativize('/dist', '/dist/about/index.html')      -> './about/index.html'
    """
    rel = os.path.relpath(to_absolute_path, from_dir)
    rel = rel.replace(os.sep, '/')
    if not rel.startswith('.'):
        rel = './' + rel
    return rel
