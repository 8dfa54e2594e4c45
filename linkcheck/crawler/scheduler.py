"""
Link check scheduler that drains the frontier with a bounded number of
concurrent tasks and detects when the crawl is complete.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from .fetcher import WebFetcher
from .parser import LinkExtractor
from .url_frontier import URLFrontier
from ..exceptions import ConfigError, InvalidSeedURLError
from ..storage.report import ReportWriter
from ..storage.results import CrawlResult, ResultStore
from ..utils.config import CrawlerConfig
from ..utils.screenshot import ScreenshotCallback, noop_screenshot
from ..utils.url import get_hostname, is_http_url, normalize_url


@dataclass
class CrawlStats:
    """Statistics for a link check run."""
    start_time: float
    urls_checked: int = 0
    pages_parsed: int = 0
    links_discovered: int = 0
    errors: int = 0
    redirects_abandoned: int = 0
    oversized_pages: int = 0
    peak_workers: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


class LinkCheckScheduler:
    """
    Crawls one site from a seed URL and checks every link it finds.

    All tasks run on a single event loop. The frontier, the result store and
    the active worker counter are only touched from synchronous code, so
    claiming a URL never interleaves with another task.

    State per run: idle -> dispatching -> draining -> done. The run ends when
    the queue is empty and no task is active; a one-shot future carries that
    signal back to run().
    """

    def __init__(self, fetcher: WebFetcher, seed_url: str, config: CrawlerConfig,
                 screenshot: Optional[ScreenshotCallback] = None,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

        try:
            valid_seed = is_http_url(seed_url)
        except ValueError:
            valid_seed = False
        if not valid_seed:
            raise InvalidSeedURLError(f"Seed URL must be an absolute http(s) URL: {seed_url!r}")

        self.seed_url = normalize_url(seed_url)
        self.base_host = get_hostname(self.seed_url)

        self.concurrency = config.concurrency if config.concurrency is not None else 1
        if self.concurrency < 1:
            raise ConfigError("concurrency must be a positive integer")
        self.interval = config.interval or 0

        # Components
        self.fetcher = fetcher
        self.screenshot = screenshot or noop_screenshot
        self.frontier = URLFrontier()
        self.parser = LinkExtractor(self.base_host, logger=self.logger)
        self.results = ResultStore()

        # Run state
        self.stats = CrawlStats(start_time=time.time())
        self.active_workers = 0
        self.tasks: Set[asyncio.Task] = set()
        self._completed: Optional[asyncio.Future] = None

    async def run(self) -> ResultStore:
        """
        Check the whole site and print the report.

        Resolves once the frontier is empty and every task has finished.
        Per-URL failures are recorded as results and never raised.
        """
        if self._completed is not None:
            raise RuntimeError("A LinkCheckScheduler can only run once")

        self.logger.info(
            f"=== LINK CHECK STARTING: {self.seed_url} "
            f"(concurrency={self.concurrency}, interval={self.interval}ms) ==="
        )
        self.stats = CrawlStats(start_time=time.time())
        self._completed = asyncio.get_running_loop().create_future()

        self.frontier.enqueue(self.seed_url)
        self._dispatch()
        await self._completed

        self._log_final_stats()
        ReportWriter(self.results, self.seed_url).print_report()
        return self.results

    def _dispatch(self):
        """Start tasks while capacity and queued URLs remain, then check for completion."""
        if self._completed is None or self._completed.done():
            return

        while self.active_workers < self.concurrency and not self.frontier.is_empty():
            url = self.frontier.dequeue()
            if not self.frontier.claim(url):
                continue

            self.active_workers += 1
            self.stats.peak_workers = max(self.stats.peak_workers, self.active_workers)

            task = asyncio.create_task(self._process_url(url))
            self.tasks.add(task)
            task.add_done_callback(self._on_task_done)

        if self.frontier.is_empty() and self.active_workers == 0:
            self._completed.set_result(None)

    def _on_task_done(self, task: asyncio.Task):
        self.tasks.discard(task)
        self.active_workers -= 1

        if not task.cancelled() and task.exception() is not None:
            self.logger.error(f"Link check task failed unexpectedly: {task.exception()!r}")

        self._dispatch()

    async def _process_url(self, url: str):
        """Probe one claimed URL and, for internal HTML pages, scan it for links."""
        try:
            if self.interval > 0:
                await asyncio.sleep(self.interval / 1000)

            self.logger.info(f"[Workers: {self.active_workers}] Checking: {url}")

            head_result = await self.fetcher.head(url)
            self.stats.urls_checked += 1

            final_url = normalize_url(head_result.final_url or url)
            if final_url != url:
                if not self.frontier.claim(final_url):
                    self.stats.redirects_abandoned += 1
                    self.logger.debug(f"Redirect target already claimed: {url} -> {final_url}")
                    return
                self.logger.debug(f"Redirected: {url} -> {final_url}")

            is_internal = self.parser.is_internal(final_url)
            status = head_result.status_code
            content_type = (head_result.content_type or '').lower()

            self.results.record(CrawlResult(url=final_url, status=status, is_external=not is_internal))

            if status >= 400:
                self.stats.errors += 1
                self.logger.error(f"HTTP {status}: {final_url}")

            if is_internal and status == 200 and 'text/html' in content_type:
                await self._scan_page(final_url)

        except Exception as e:
            message = str(e) or e.__class__.__name__
            self.stats.errors += 1
            self.logger.error(f"Error ({url}): {message}")
            self.results.record(CrawlResult(url=url, status=f"ERR: {message}", is_external=False))

    async def _scan_page(self, page_url: str):
        """Download an internal HTML page and queue the links it contains."""
        page = await self.fetcher.get(page_url)
        if page.content is None:
            # Body exceeded max_content_bytes; its links stay unchecked
            html = ''
            self.stats.errors += 1
            self.stats.oversized_pages += 1
            self.logger.error(f"Page too large to scan for links: {page_url}")
        else:
            html = page.content
            self.stats.pages_parsed += 1
            self._queue_links(html, page_url)

        try:
            await self.screenshot(page_url, html)
        except Exception as e:
            self.logger.error(f"Screenshot failed for {page_url}: {e}")

    def _queue_links(self, html: str, page_url: str):
        """Queue the unvisited links of a page and start tasks for them."""
        links = self.parser.extract_links(html, page_url, include_external=True)
        new_links = [link for link in links if not self.frontier.is_visited(link)]
        for link in new_links:
            self.frontier.enqueue(link)

        self.stats.links_discovered += len(new_links)
        self.logger.debug(f"Queued {len(new_links)} new links from {page_url}")

        # Free slots can pick up the new links while this task finishes
        self._dispatch()

    def _log_final_stats(self):
        """Log final run statistics."""
        frontier_stats = self.frontier.get_stats()
        summary = self.results.summary()

        self.logger.info("=== LINK CHECK COMPLETED ===")
        self.logger.info(f"URLs checked: {self.stats.urls_checked}")
        self.logger.info(f"Pages parsed: {self.stats.pages_parsed}")
        self.logger.info(f"Links discovered: {self.stats.links_discovered}")
        self.logger.info(f"Results: {summary['ok']} ok, {summary['failed']} failed")
        self.logger.info(f"Errors: {self.stats.errors}")
        if self.stats.oversized_pages:
            self.logger.warning(f"Pages too large to scan: {self.stats.oversized_pages}")
        self.logger.info(f"Peak concurrent workers: {self.stats.peak_workers}")
        self.logger.info(f"Total time: {self.stats.elapsed_time:.2f} seconds")
        self.logger.debug(f"Frontier stats: {frontier_stats}")

        get_fetcher_stats = getattr(self.fetcher, 'get_stats', None)
        if callable(get_fetcher_stats):
            self.logger.debug(f"Fetcher stats: {get_fetcher_stats()}")

    def get_stats(self) -> Dict[str, Any]:
        """Get current run statistics."""
        return {
            'urls_checked': self.stats.urls_checked,
            'pages_parsed': self.stats.pages_parsed,
            'links_discovered': self.stats.links_discovered,
            'errors': self.stats.errors,
            'redirects_abandoned': self.stats.redirects_abandoned,
            'oversized_pages': self.stats.oversized_pages,
            'peak_workers': self.stats.peak_workers,
            'active_workers': self.active_workers,
            'urls_in_queue': len(self.frontier),
            'elapsed_time': self.stats.elapsed_time
        }
