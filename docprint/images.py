"""
Point relative image sources at a location the final document can load them from.
"""
from __future__ import annotations

import xml.etree.ElementTree as etree
from typing import Optional

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .document import Document
from .location import is_absolute_path, join, prepare_link
from .tree import walk

IMAGE_PRIORITY = 2


def resolve_image(src: str, base: str, root: str) -> str:
    if not src or is_absolute_path(src):
        return src
    return join(root, prepare_link(src, base))


class ImageLinkTreeprocessor(Treeprocessor):
    def __init__(self, md: Markdown, document: Document):
        super().__init__(md)
        self.document = document

    def run(self, root: etree.Element) -> Optional[etree.Element]:
        for el, _ in walk(root):
            if el.tag == 'img' and el.get('src'):
                el.set('src', resolve_image(el.get('src'), self.document.base, self.document.cwd))
        return None


class ImageLinkExtension(Extension):
    def __init__(self, document: Document, **kwargs):
        self.document = document
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        md.treeprocessors.register(ImageLinkTreeprocessor(md, self.document), 'docprint_images', IMAGE_PRIORITY)
