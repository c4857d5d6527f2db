"""
Render-pass rewriting that makes one page safe to concatenate with others.

Relative links become ``<content_page>#<anchor>`` where ``<anchor>`` is the
resolved docset path with every ``/`` and ``#`` turned into ``--``. Every element
id (headings, footnotes, attr_list targets) gets the same treatment, scoped to
the page that owns it, so two pages that both have an ``#intro`` heading no
longer collide and in-page fragment links still land.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as etree
from typing import Optional

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .document import Document
from .location import is_absolute_path, prepare_link, to_anchor_path
from .tree import iter_ids, iter_links, link_href

logger = logging.getLogger(__name__)

# Stock extensions (toc=5, attr_list=8, inline=20) all run before these.
LINK_PRIORITY = 4
ID_PRIORITY = 3


def rewrite_href(href: str, base: str, content_page: str = '') -> str:
    if is_absolute_path(href):
        return href
    return f"{content_page}#{to_anchor_path(prepare_link(href, base))}"


def rewrite_id(element_id: str, base: str) -> str:
    return to_anchor_path(prepare_link(f"#{element_id}", base))


class LinkRewriteTreeprocessor(Treeprocessor):
    def __init__(self, md: Markdown, document: Document, content_page: str = ''):
        super().__init__(md)
        self.document = document
        self.content_page = content_page

    def run(self, root: etree.Element) -> Optional[etree.Element]:
        for link, _ in iter_links(root):
            href = link_href(link)
            # absolute hrefs stay exactly as the inline patterns built them
            if not is_absolute_path(href):
                link.set('href', rewrite_href(href, self.document.base, self.content_page))
        return None


class ElementIdTreeprocessor(Treeprocessor):
    def __init__(self, md: Markdown, document: Document):
        super().__init__(md)
        self.document = document

    def run(self, root: etree.Element) -> Optional[etree.Element]:
        for el in iter_ids(root):
            el.set('id', rewrite_id(el.get('id'), self.document.base))
        return None


class LinkRewriteExtension(Extension):
    def __init__(self, document: Document, content_page: str = '', **kwargs):
        self.document = document
        self.content_page = content_page
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        md.treeprocessors.register(
            LinkRewriteTreeprocessor(md, self.document, self.content_page), 'docprint_fix_links', LINK_PRIORITY)
        md.treeprocessors.register(ElementIdTreeprocessor(md, self.document), 'docprint_fix_ids', ID_PRIORITY)
