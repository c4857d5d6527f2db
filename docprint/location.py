"""
Location helpers: classify, resolve and normalize page references inside a docset.

Nothing here raises on odd input. A path that cannot be meaningfully resolved is
still normalized on a best-effort basis; the fetch layer reports it as missing.
"""
from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_ANCHOR_RE = re.compile(r"[/#]")


@dataclass
class PageFile:
    cwd: str
    path: str


def is_absolute_path(url: str) -> bool:
    """True for references that leave the docset (scheme or protocol-relative)."""
    if not url:
        return False
    return url.startswith('//') or bool(_SCHEME_RE.match(url))


def _normalize(path: str) -> str:
    trailing = path.endswith('/') and path != '/'
    path = re.sub(r"/+", '/', '/' + path)
    out = posixpath.normpath(path)
    # normpath keeps a leading '//' as-is on POSIX
    out = re.sub(r"^/+", '/', out)
    if trailing and not out.endswith('/'):
        out += '/'
    return out


def prepare_link(url: str, base: str) -> str:
    """Resolve ``url`` against the page at ``base`` into a rooted docset path.

    Absolute references pass through unchanged. A bare ``#fragment`` resolves to
    the base page itself. The result always starts with ``/`` and resolving it
    again against any base yields the same string.
    """
    if is_absolute_path(url):
        return url
    path, sep, fragment = (url or '').partition('#')
    if not path:
        resolved = base or '/'
    elif path.startswith('/'):
        resolved = path
    else:
        resolved = posixpath.join(posixpath.dirname(base or '/'), path)
    resolved = _normalize(resolved)
    return f"{resolved}#{fragment}" if sep else resolved


resolve = prepare_link


def page_to_file(path: str, root: str = '') -> PageFile:
    """Map a logical page path onto the Markdown file that backs it."""
    clean = re.split(r"[?#]", path or '', maxsplit=1)[0]
    clean = _normalize(clean or '/')
    if clean.endswith('/'):
        clean += 'README.md'
    elif '.' not in posixpath.basename(clean):
        clean += '.md'
    return PageFile(cwd=root, path=clean)


def join(cwd: str, path: str) -> str:
    if not cwd:
        return path
    return cwd.rstrip('/') + '/' + path.lstrip('/')


def to_anchor_path(path: str) -> str:
    return _ANCHOR_RE.sub('--', path)


def anchor_id(path: str) -> str:
    return re.sub(r"^/", '', path)
