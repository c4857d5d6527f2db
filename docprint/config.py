from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ['toc', 'attr_list', 'tables', 'fenced_code']


class ConfigError(Exception):
    pass


@dataclass
class PrintSettings:
    """Per-run options handed to the assembler."""
    extension_transforms: List[Any] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    extension_configs: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    coverpage_path: Optional[str] = None
    trust_output: bool = True
    content_page: str = ''
    skip_missing: bool = False


def _truthy(value: object) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "y", "on")


def parse_extensions(items: object) -> Tuple[List[str], Dict[str, Dict[str, Any]]]:
    """Accept mkdocs-style ``markdown_extensions``: names or ``{name: config}`` mappings."""
    if items is None:
        return [], {}
    if isinstance(items, str):
        items = [s for s in (p.strip() for p in items.split(',')) if s]
    if not isinstance(items, list):
        raise ConfigError('markdown_extensions must be a list')
    names: List[str] = []
    configs: Dict[str, Dict[str, Any]] = {}
    for item in items:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, dict) and len(item) == 1:
            name, cfg = next(iter(item.items()))
            names.append(str(name))
            if cfg:
                if not isinstance(cfg, dict):
                    raise ConfigError(f'markdown_extensions.{name} config must be a mapping')
                configs[str(name)] = cfg
        else:
            raise ConfigError(f'Unsupported markdown_extensions entry: {item!r}')
    return names, configs


@dataclass
class Config:
    root: str
    summary: str = 'SUMMARY.md'
    coverpage: Optional[str] = None
    content_page: str = ''
    trust_output: bool = True
    skip_missing: bool = False
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    extension_configs: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    title: Optional[str] = None
    output: Path = field(default_factory=lambda: Path('print.html'))

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        load_dotenv(override=False)
        data: Dict[str, Any] = {}

        settings_path = overrides.pop('settings', None) or os.getenv('DOCPRINT_SETTINGS')
        if settings_path:
            data.update(cls._load_settings(Path(settings_path)))

        wanted = {
            'DOCPRINT_ROOT': 'root',
            'DOCPRINT_SUMMARY': 'summary',
            'DOCPRINT_COVERPAGE': 'coverpage',
            'DOCPRINT_CONTENT_PAGE': 'content_page',
            'DOCPRINT_TITLE': 'title',
        }
        for k, a in wanted.items():
            v = os.getenv(k)
            if v:
                data[a] = v
        for k, a in (('DOCPRINT_TRUST_OUTPUT', 'trust_output'), ('DOCPRINT_SKIP_MISSING', 'skip_missing')):
            v = os.getenv(k)
            if v is not None:
                data[a] = _truthy(v)
        ext = os.getenv('DOCPRINT_EXTENSIONS')
        if ext is not None:
            data['extensions'], _ = parse_extensions(ext)
        out = os.getenv('DOCPRINT_OUTPUT')
        if out:
            data['output'] = Path(out)

        data.update({k: v for k, v in overrides.items() if v is not None})
        if not data.get('root'):
            raise ConfigError('Missing env: DOCPRINT_ROOT')
        if isinstance(data.get('output'), str):
            data['output'] = Path(data['output'])
        cfg = cls(**data)
        cfg.validate()
        return cfg

    @staticmethod
    def _load_settings(path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f'Could not read settings {path}: {e}') from e
        except yaml.YAMLError as e:
            raise ConfigError(f'Invalid YAML in {path}: {e}') from e
        if not isinstance(raw, dict):
            raise ConfigError(f'{path} must contain a mapping')

        data: Dict[str, Any] = {}
        for k in ('root', 'summary', 'coverpage', 'content_page', 'title'):
            if raw.get(k) is not None:
                data[k] = str(raw[k])
        for k in ('trust_output', 'skip_missing'):
            if k in raw:
                data[k] = raw[k] if isinstance(raw[k], bool) else _truthy(raw[k])
        if 'markdown_extensions' in raw:
            data['extensions'], data['extension_configs'] = parse_extensions(raw['markdown_extensions'])
        logger.debug("Loaded settings from %s: %s", path, sorted(data))
        return data

    def validate(self) -> None:
        if not self.summary:
            raise ConfigError('summary path must not be empty')
        if not self.root.startswith(('http://', 'https://')) and not Path(self.root).is_dir():
            raise ConfigError(f'DOCPRINT_ROOT is neither an http(s) URL nor a directory: {self.root}')
        unknown = set(self.extension_configs) - set(self.extensions)
        if unknown:
            raise ConfigError('Config given for unused extensions: ' + ', '.join(sorted(unknown)))

    def settings(self) -> PrintSettings:
        return PrintSettings(
            extension_transforms=list(self.extensions),
            extension_configs=dict(self.extension_configs),
            coverpage_path=self.coverpage,
            trust_output=self.trust_output,
            content_page=self.content_page,
            skip_missing=self.skip_missing,
        )
