"""
Fetch capability: ``await fetcher.get(url)`` returns a :class:`Resource`.

A missing page is not an error at this layer; it comes back with
``not_found=True`` and the caller decides what that means.
"""
from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

import requests

logger = logging.getLogger(__name__)


class FetchError(Exception):
    pass


@dataclass
class Resource:
    contents: str = ''
    not_found: bool = False


class Fetcher(Protocol):
    async def get(self, url: str) -> Resource:
        ...


class FileFetcher:
    """Reads pages from a local directory tree."""

    async def get(self, url: str) -> Resource:
        return await asyncio.to_thread(self._read, url)

    @staticmethod
    def _read(url: str) -> Resource:
        path = Path(url)
        try:
            text = path.read_text(encoding='utf-8')
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            logger.debug("Not found: %s", path)
            return Resource(not_found=True)
        except (OSError, UnicodeDecodeError) as e:
            raise FetchError(f"{path}: {e}") from e
        logger.debug("Read %s (%d chars)", path, len(text))
        return Resource(contents=text)


class HttpFetcher:
    """Fetches pages over HTTP.

    Requests run in worker threads, so each thread gets its own session from
    ``session_factory`` and the request counter is lock-guarded.
    """
    DEFAULT_RETRY_AFTER = 1
    MAX_RETRIES = 3
    NOT_FOUND = (404, 410)

    def __init__(self, session_factory: Callable[[], requests.Session] = requests.Session, timeout: float = 30):
        self.session_factory = session_factory
        self.timeout = timeout
        self._count = 0
        self._lock = threading.Lock()
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self.session_factory()
            session.headers.update({"Accept": "text/markdown, text/plain, */*", "User-Agent": "docprint"})
            self._local.session = session
        return session

    async def get(self, url: str) -> Resource:
        return await asyncio.to_thread(self._get, url)

    def _get(self, url: str) -> Resource:
        for i in range(self.MAX_RETRIES):
            try:
                with self._lock:
                    self._count += 1
                r = self.session.get(url, timeout=self.timeout)
                if r.status_code in self.NOT_FOUND:
                    logger.debug("Not found: %s", url)
                    return Resource(not_found=True)
                if r.status_code == 429:
                    time.sleep(int(r.headers.get('Retry-After', self.DEFAULT_RETRY_AFTER)))
                    continue
                r.raise_for_status()
                r.encoding = r.encoding or 'utf-8'
                logger.debug("Fetched %s (%d chars)", url, len(r.text))
                return Resource(contents=r.text)
            except requests.RequestException as e:
                if i == self.MAX_RETRIES - 1:
                    raise FetchError(f"{url}: {e}") from e
                time.sleep(2 ** (i + 1))
        raise FetchError(f"{url}: still rate limited after {self.MAX_RETRIES} attempts")

    def stats(self) -> dict:
        with self._lock:
            return {"requests": self._count}


def fetcher_for(root: str) -> Fetcher:
    if root.startswith(('http://', 'https://')):
        return HttpFetcher()
    return FileFetcher()
