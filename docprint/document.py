from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import yaml

from .location import to_anchor_path

logger = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?\r?\n)?(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.DOTALL)


@dataclass
class Document:
    """One page being processed.

    ``history[0]`` is the rooted page path the document was loaded from; it is
    the base location for every relative reference inside it.
    """
    path: str
    cwd: str = ''
    contents: str = ''
    history: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.path)

    @property
    def base(self) -> str:
        return self.history[0]


@dataclass
class TocEntry:
    name: str
    url: str
    content: str
    depth: int


@dataclass
class RenderedFragment:
    anchor_id: str
    html: str

    def to_html(self) -> str:
        markers = f'<a id="--{self.anchor_id}"></a><a id="{self.anchor_id}"></a>'
        # rewritten links to nested pages point at the fully dash-encoded path
        encoded = to_anchor_path('/' + self.anchor_id)
        if encoded != f'--{self.anchor_id}':
            markers = f'<a id="{encoded}"></a>' + markers
        return f'{markers}{self.html}<hr>'


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """Strip a leading YAML block and return ``(matter, body)``."""
    m = _FRONT_MATTER_RE.match(text or '')
    if not m:
        return {}, text or ''
    body = text[m.end():]
    try:
        matter = yaml.safe_load(m.group(1) or '') or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid front matter: %s", e)
        return {}, body
    if not isinstance(matter, dict):
        logger.warning("Ignoring front matter that is not a mapping (%s)", type(matter).__name__)
        return {}, body
    return matter, body
