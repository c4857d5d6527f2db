"""
Render one docset page into an addressable HTML fragment.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from markdown import Markdown
from markdown.extensions import Extension

from .document import Document, RenderedFragment
from .fetch import Fetcher
from .images import ImageLinkExtension
from .location import anchor_id, join, page_to_file
from .rewriter import LinkRewriteExtension
from .tree import FrontMatterExtension

logger = logging.getLogger(__name__)

ExtensionSpec = Union[str, Extension]


class PageNotFound(Exception):
    def __init__(self, path: str):
        super().__init__(f"Page not found: {path}")
        self.path = path


class RenderError(Exception):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Failed to render {path}: {cause}")
        self.path = path
        self.cause = cause


class PageRenderer:
    def __init__(
        self,
        root: str,
        fetcher: Fetcher,
        extensions: Optional[List[ExtensionSpec]] = None,
        extension_configs: Optional[Dict[str, Dict[str, Any]]] = None,
        content_page: str = '',
        skip_missing: bool = False,
    ):
        self.root = root
        self.fetcher = fetcher
        self.extensions = list(extensions or [])
        self.extension_configs = dict(extension_configs or {})
        self.content_page = content_page
        self.skip_missing = skip_missing

    def processor(self, document: Document) -> Markdown:
        """A fresh pipeline per page so no tree or state is shared between renders."""
        return Markdown(
            extensions=[
                FrontMatterExtension(document),
                *self.extensions,
                LinkRewriteExtension(document, self.content_page),
                ImageLinkExtension(document),
            ],
            extension_configs=self.extension_configs,
        )

    def render_document(self, document: Document) -> RenderedFragment:
        try:
            html = self.processor(document).convert(document.contents)
        except Exception as e:
            raise RenderError(document.path, e) from e
        return RenderedFragment(anchor_id=anchor_id(document.base), html=html)

    async def render(self, path: str, missing_ok: bool = False) -> RenderedFragment:
        vfile = page_to_file(path, self.root)
        url = join(vfile.cwd, vfile.path)
        res = await self.fetcher.get(url)
        if res.not_found:
            if missing_ok:
                logger.debug("Missing page %s left empty", vfile.path)
            elif self.skip_missing:
                logger.warning("Skipping missing page %s", vfile.path)
            else:
                raise PageNotFound(vfile.path)
            return RenderedFragment(anchor_id=anchor_id(vfile.path), html='')
        document = Document(path=vfile.path, cwd=vfile.cwd, contents=res.contents)
        fragment = self.render_document(document)
        logger.debug("Rendered %s (%d chars)", vfile.path, len(fragment.html))
        return fragment
