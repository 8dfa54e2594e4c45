"""
Optional screenshot capture of checked pages.

The scheduler calls a screenshot callback once per internal HTML page after
downloading it. The default callback does nothing; PlaywrightScreenshotter
renders the page in headless Chromium and writes a PNG per URL.
"""

import hashlib
import logging
import re
from pathlib import Path
from typing import Awaitable, Callable, Optional
from urllib.parse import urlparse

ScreenshotCallback = Callable[[str, str], Awaitable[None]]


async def noop_screenshot(url: str, html: str) -> None:
    """Default screenshot callback."""
    return None


def screenshot_filename(url: str) -> str:
    """Build a filesystem-safe PNG name for a URL."""
    parsed = urlparse(url)
    slug = re.sub(r'[^A-Za-z0-9]+', '_', f"{parsed.netloc}{parsed.path}").strip('_') or 'page'
    url_hash = hashlib.sha1(url.encode('utf-8')).hexdigest()[:10]
    return f"{slug[:100]}_{url_hash}.png"


class PlaywrightScreenshotter:
    """
    Screenshot callback backed by Playwright.

    One browser is launched for the whole run. Failures are logged and never
    raised, so a broken screenshot cannot affect the link check itself.
    Playwright is imported lazily so installs without the extra still work.
    """

    def __init__(self, directory: str, full_page: bool = True, timeout: int = 30000,
                 user_agent: Optional[str] = None, username: Optional[str] = None,
                 password: Optional[str] = None):
        self.directory = Path(directory)
        self.full_page = full_page
        self.timeout = timeout
        self.user_agent = user_agent
        self.username = username
        self.password = password
        self.logger = logging.getLogger(__name__)

        self._playwright = None
        self._browser = None
        self._context = None
        self.captured = 0

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Launch the headless browser."""
        try:
            from playwright.async_api import async_playwright
        except ImportError as e:
            raise RuntimeError(
                "Screenshots requested but Playwright is not installed. "
                "Install 'linkcheck[screenshot]' and run 'python -m playwright install chromium'."
            ) from e

        self.directory.mkdir(parents=True, exist_ok=True)

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=True)

        context_options = {}
        if self.user_agent:
            context_options['user_agent'] = self.user_agent
        if self.username and self.password:
            context_options['http_credentials'] = {
                'username': self.username,
                'password': self.password
            }
        self._context = await self._browser.new_context(**context_options)
        self.logger.info(f"Screenshots enabled, writing to {self.directory}")

    async def close(self):
        """Shut down the browser."""
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def __call__(self, url: str, html: str) -> None:
        if self._context is None:
            self.logger.error(f"Screenshot skipped, browser not started: {url}")
            return

        path = self.directory / screenshot_filename(url)
        page = await self._context.new_page()
        try:
            try:
                await page.goto(url, wait_until='load', timeout=self.timeout)
            except Exception as e:
                # Render the already downloaded document instead
                self.logger.debug(f"Navigation failed for {url}, using fetched HTML: {e}")
                await page.set_content(html, timeout=self.timeout)

            await page.screenshot(path=str(path), full_page=self.full_page, timeout=self.timeout)
            self.captured += 1
            self.logger.debug(f"Screenshot saved: {path}")
        except Exception as e:
            self.logger.error(f"Screenshot failed for {url}: {e}")
        finally:
            await page.close()
