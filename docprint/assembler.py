"""
Assemble a whole docset into one printable HTML document.

The summary page is read first to discover the page list; every page is then
fetched and rendered concurrently, and the fragments are joined in page-list
order regardless of which fetch finished first.
"""
from __future__ import annotations

import asyncio
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup

from .collector import collect
from .config import PrintSettings
from .document import Document
from .fetch import Fetcher, fetcher_for
from .location import is_absolute_path, join, page_to_file
from .renderer import PageRenderer

logger = logging.getLogger(__name__)

UNSAFE_TAGS = ('script', 'style', 'iframe', 'object', 'embed')
_JS_URL_RE = re.compile(r"^\s*javascript:", re.IGNORECASE)


@dataclass
class AssembledDocument:
    html: str
    trusted: bool
    pages: List[str] = field(default_factory=list)


def sanitize(html: str) -> str:
    soup = BeautifulSoup(html or '', 'html.parser')
    for t in soup.find_all(list(UNSAFE_TAGS)):
        t.decompose()
    for t in soup.find_all(True):
        for attr in list(t.attrs):
            if attr.lower().startswith('on') or attr.lower() == 'style':
                del t[attr]
            elif attr.lower() in ('href', 'src') and _JS_URL_RE.match(t.get(attr) or ''):
                del t[attr]
    return str(soup)


def build_page_list(summary_path: str, paths: List[str], coverpage_path: Optional[str] = None) -> List[str]:
    pages = [summary_path, *paths]
    if coverpage_path:
        pages.insert(0, coverpage_path)
    return pages


class DocumentAssembler:
    def __init__(self, root: str, fetcher: Optional[Fetcher] = None):
        self.root = root
        self.fetcher = fetcher or fetcher_for(root)

    async def load_summary(self, summary_path: str) -> List[str]:
        """Page paths linked from the summary, or ``[]`` if it does not exist."""
        vfile = page_to_file(summary_path, self.root)
        res = await self.fetcher.get(join(vfile.cwd, vfile.path))
        if res.not_found:
            logger.warning("Summary %s not found; printing without a table of contents", vfile.path)
            return []
        document = Document(path=vfile.path, cwd=vfile.cwd, contents=res.contents)
        paths: List[str] = []
        for entry in collect(document):
            if is_absolute_path(entry.url):
                logger.debug("Skipping external link %s", entry.url)
                continue
            paths.append(entry.url if entry.url.startswith('/') else '/' + entry.url)
        logger.info("Summary %s lists %d pages", vfile.path, len(paths))
        return paths

    async def assemble(
        self,
        summary_path: str,
        coverpage_path: Optional[str] = None,
        settings: Optional[PrintSettings] = None,
    ) -> AssembledDocument:
        settings = settings or PrintSettings()
        coverpage_path = coverpage_path or settings.coverpage_path

        paths = await self.load_summary(summary_path)
        pages = build_page_list(summary_path, paths, coverpage_path)
        dupes = [p for p, n in Counter(pages).items() if n > 1]
        if dupes:
            logger.warning("Pages referenced more than once will repeat: %s", ', '.join(dupes))

        renderer = PageRenderer(
            self.root,
            self.fetcher,
            extensions=settings.extension_transforms,
            extension_configs=settings.extension_configs,
            content_page=settings.content_page,
            skip_missing=settings.skip_missing,
        )
        # the summary was already tolerated as missing during discovery
        summary_index = 1 if coverpage_path else 0
        fragments = await asyncio.gather(*(
            renderer.render(p, missing_ok=(i == summary_index)) for i, p in enumerate(pages)
        ))
        contents = '\n\n'.join(f.to_html() for f in fragments)

        html = contents if settings.trust_output else sanitize(contents)
        return AssembledDocument(html=html, trusted=settings.trust_output, pages=pages)
