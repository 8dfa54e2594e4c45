import asyncio
import logging
from typing import Dict, List, Optional, Tuple, Union

import pytest

from linkcheck.crawler.fetcher import FetchResult
from linkcheck.utils.config import CrawlerConfig


class FakeFetcher:
    """
    Stand-in for WebFetcher that serves canned responses and records calls.

    Routes are keyed by the exact URL requested. Unknown URLs answer with
    `default_head` (or 404 when it is unset).
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.head_routes: Dict[str, Union[dict, Exception]] = {}
        self.get_routes: Dict[str, Union[dict, Exception]] = {}
        self.default_head: Optional[dict] = None
        self.calls: List[Tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        # When set, HEAD calls sample the scheduler's active worker count
        self.scheduler = None
        self.max_active_seen = 0

    def on_head(self, url: str, status: int = 200, content_type: str = 'text/html; charset=utf-8',
                final_url: Optional[str] = None):
        self.head_routes[url] = {'status': status, 'content_type': content_type, 'final_url': final_url}

    def on_get(self, url: str, body: str, status: int = 200, content_type: str = 'text/html'):
        self.get_routes[url] = {'status': status, 'content_type': content_type, 'body': body}

    def fail_head(self, url: str, error: Exception):
        self.head_routes[url] = error

    def fail_get(self, url: str, error: Exception):
        self.get_routes[url] = error

    @property
    def head_calls(self) -> List[str]:
        return [url for method, url in self.calls if method == 'HEAD']

    @property
    def get_calls(self) -> List[str]:
        return [url for method, url in self.calls if method == 'GET']

    async def head(self, url: str) -> FetchResult:
        self.calls.append(('HEAD', url))
        if self.scheduler is not None:
            self.max_active_seen = max(self.max_active_seen, self.scheduler.active_workers)
        return await self._respond(url, self.head_routes.get(url, self.default_head))

    async def get(self, url: str) -> FetchResult:
        self.calls.append(('GET', url))
        return await self._respond(url, self.get_routes.get(url))

    async def _respond(self, url: str, route) -> FetchResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if isinstance(route, Exception):
                raise route
            if route is None:
                return FetchResult(url=url, final_url=url, status_code=404, content_type='text/plain')
            return FetchResult(
                url=url,
                final_url=route.get('final_url') or url,
                status_code=route['status'],
                content_type=route['content_type'],
                content=route.get('body')
            )
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def crawler_config():
    return CrawlerConfig(concurrency=1, interval=0)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
