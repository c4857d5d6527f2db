"""
Discovery pass: read the summary page and list every link it makes, in order.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as etree
from typing import List, Optional

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .document import Document, TocEntry
from .location import is_absolute_path, prepare_link
from .tree import FrontMatterExtension, iter_links, link_href, text_content, walk

logger = logging.getLogger(__name__)


def entry_name(document: Document) -> str:
    matter = document.data.get('matter') or {}
    return matter.get('title') or document.data.get('title') or document.path


def normalize_toc_url(url: str, base: str) -> str:
    if is_absolute_path(url):
        return url
    return prepare_link(url, base)


class LinkCollectorTreeprocessor(Treeprocessor):
    def __init__(self, md: Markdown, document: Document):
        super().__init__(md)
        self.document = document

    def run(self, root: etree.Element) -> Optional[etree.Element]:
        doc = self.document
        for el, _ in walk(root):
            if el.tag == 'h1':
                doc.data.setdefault('title', text_content(el))
                break
        name = entry_name(doc)
        entries: List[TocEntry] = []
        for link, depth in iter_links(root):
            entries.append(TocEntry(
                name=name,
                url=normalize_toc_url(link_href(link), doc.base),
                content=text_content(link),
                depth=depth,
            ))
        doc.data['toc_search'] = entries
        return None


class LinkCollectorExtension(Extension):
    def __init__(self, document: Document, **kwargs):
        self.document = document
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        # last, once escapes are restored
        md.treeprocessors.register(LinkCollectorTreeprocessor(md, self.document), 'docprint_collect_links', -1)


def collect(document: Document) -> List[TocEntry]:
    """Parse ``document`` and return its table-of-contents entries.

    The tree is only read; entries keep source order and are not deduplicated.
    """
    md = Markdown(extensions=[FrontMatterExtension(document), 'toc', LinkCollectorExtension(document)])
    md.convert(document.contents)
    entries = document.data.get('toc_search', [])
    logger.debug("Collected %d links from %s", len(entries), document.path)
    return entries
