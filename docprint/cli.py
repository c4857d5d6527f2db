"""
docprint: render a Markdown docset into a single printable HTML file.

Settings come from the environment (or .env), an optional YAML settings file,
and command line flags, in increasing order of precedence.
"""
from __future__ import annotations

import argparse
import asyncio
import html as htmlesc
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .assembler import AssembledDocument, DocumentAssembler
from .config import Config, ConfigError
from .fetch import FetchError
from .renderer import PageNotFound, RenderError

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog='docprint', description=__doc__.strip().splitlines()[0])
    p.add_argument('root', nargs='?', help='docset root directory or http(s) URL (DOCPRINT_ROOT)')
    p.add_argument('--summary', help='summary page path (DOCPRINT_SUMMARY, default SUMMARY.md)')
    p.add_argument('--coverpage', help='cover page path (DOCPRINT_COVERPAGE)')
    p.add_argument('--content-page', dest='content_page', help='page prefix for rewritten links')
    p.add_argument('--settings', help='YAML settings file (DOCPRINT_SETTINGS)')
    p.add_argument('-o', '--output', help='output HTML file (DOCPRINT_OUTPUT, default print.html)')
    p.add_argument('--title', help='document title')
    p.add_argument('--untrusted', action='store_true', help='sanitize the generated HTML')
    p.add_argument('--skip-missing', action='store_true', help='leave missing pages empty instead of failing')
    p.add_argument('-v', '--verbose', action='store_true')
    return p.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    overrides = {
        'root': args.root,
        'summary': args.summary,
        'coverpage': args.coverpage,
        'content_page': args.content_page,
        'settings': args.settings,
        'output': args.output,
        'title': args.title,
    }
    if args.untrusted:
        overrides['trust_output'] = False
    if args.skip_missing:
        overrides['skip_missing'] = True
    cfg = Config.from_env(**overrides)
    if not cfg.root.startswith(('http://', 'https://')):
        cfg.root = str(Path(cfg.root).resolve())
    return cfg


def write_document(doc: AssembledDocument, path: Path, title: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(PAGE_TEMPLATE.format(title=htmlesc.escape(title), body=doc.html), encoding='utf-8')


async def run(cfg: Config) -> AssembledDocument:
    assembler = DocumentAssembler(cfg.root)
    return await assembler.assemble(cfg.summary, settings=cfg.settings())


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    try:
        cfg = load_config(args)
        logger.info('Printing %s from %s', cfg.summary, cfg.root)
        doc = asyncio.run(run(cfg))
        write_document(doc, cfg.output, cfg.title or Path(cfg.summary).stem)
        logger.info('Wrote %s (pages=%d trusted=%s)', cfg.output, len(doc.pages), doc.trusted)
    except (ConfigError, FetchError, PageNotFound, RenderError) as e:
        logger.error(str(e)); sys.exit(1)
    except KeyboardInterrupt:
        logger.info('Interrupted'); sys.exit(130)
    except Exception as e:
        logger.exception('Unexpected error: %s', e); sys.exit(1)


if __name__ == '__main__':
    main()
