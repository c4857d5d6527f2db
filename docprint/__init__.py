from .assembler import AssembledDocument, DocumentAssembler, build_page_list, sanitize
from .collector import collect
from .config import Config, ConfigError, PrintSettings
from .document import Document, RenderedFragment, TocEntry
from .fetch import FetchError, FileFetcher, HttpFetcher, Resource, fetcher_for
from .location import is_absolute_path, page_to_file, prepare_link, resolve
from .renderer import PageNotFound, PageRenderer, RenderError

__version__ = '0.1.0'

__all__ = [
    'AssembledDocument',
    'Config',
    'ConfigError',
    'Document',
    'DocumentAssembler',
    'FetchError',
    'FileFetcher',
    'HttpFetcher',
    'PageNotFound',
    'PageRenderer',
    'PrintSettings',
    'RenderError',
    'RenderedFragment',
    'Resource',
    'TocEntry',
    'build_page_list',
    'collect',
    'fetcher_for',
    'is_absolute_path',
    'page_to_file',
    'prepare_link',
    'resolve',
    'sanitize',
]
