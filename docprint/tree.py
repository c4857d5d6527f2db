"""
Traversal over Python-Markdown's element tree plus the front-matter hook.

The discovery pass only reads through these helpers; the rewrite pass mutates
the elements they yield in place.
"""
from __future__ import annotations

import html
import re
import xml.etree.ElementTree as etree
from typing import Iterator, Tuple

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markdown.util import AMP_SUBSTITUTE, STX, ETX

from .document import Document, split_front_matter

LISTS = ('ul', 'ol')

_PLACEHOLDER_RE = re.compile(f"{STX}[^{ETX}]*{ETX}")


def walk(root: etree.Element, depth: int = 0) -> Iterator[Tuple[etree.Element, int]]:
    """Depth-first, document-order walk yielding ``(element, list_depth)``.

    ``list_depth`` counts the ``ul``/``ol`` elements enclosing the element.
    """
    for child in root:
        yield child, depth
        yield from walk(child, depth + 1 if child.tag in LISTS else depth)


def iter_links(root: etree.Element) -> Iterator[Tuple[etree.Element, int]]:
    for el, depth in walk(root):
        if el.tag == 'a' and el.get('href') is not None:
            yield el, depth


def iter_ids(root: etree.Element) -> Iterator[etree.Element]:
    """Every element carrying an ``id``: headings, footnotes, attr_list targets."""
    for el, _ in walk(root):
        if el.get('id'):
            yield el


def decode(value: str) -> str:
    """Undo the entity placeholders inline patterns leave in text and attributes."""
    return html.unescape(value.replace(AMP_SUBSTITUTE, '&'))


def link_href(el: etree.Element) -> str:
    return decode(el.get('href') or '')


def text_content(el: etree.Element) -> str:
    return _PLACEHOLDER_RE.sub('', decode(''.join(el.itertext()))).strip()


class FrontMatterPreprocessor(Preprocessor):
    def __init__(self, md: Markdown, document: Document):
        super().__init__(md)
        self.document = document

    def run(self, lines):
        matter, body = split_front_matter('\n'.join(lines))
        self.document.data['matter'] = matter
        return body.split('\n')


class FrontMatterExtension(Extension):
    """Strips a YAML front-matter block into ``document.data['matter']``."""

    def __init__(self, document: Document, **kwargs):
        self.document = document
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        md.preprocessors.register(FrontMatterPreprocessor(md, self.document), 'docprint_front_matter', 25)
