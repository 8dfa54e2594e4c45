"""
HTTP client used to probe and download pages.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp
from aiohttp import ClientResponse, ClientSession, ClientTimeout


@dataclass
class FetchResult:
    """Response of a HEAD or GET request after redirects were followed."""
    url: str
    final_url: str
    status_code: int
    content_type: str = ''
    headers: Optional[Dict[str, str]] = None
    content: Optional[str] = None


class WebFetcher:
    """
    Thin wrapper around one aiohttp session.

    Every status code is returned as data; only transport failures
    (connection errors, timeouts) raise. Callers decide how to handle them.
    """

    def __init__(self, user_agent: str, request_timeout: float = 8.0,
                 username: Optional[str] = None, password: Optional[str] = None,
                 max_content_bytes: int = 10 * 1024 * 1024):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.auth = aiohttp.BasicAuth(username, password) if username and password else None
        self.max_content_bytes = max_content_bytes

        self.logger = logging.getLogger(__name__)
        self.session: Optional[ClientSession] = None

        self.stats = {
            'head_requests': 0,
            'get_requests': 0,
            'failed_requests': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.request_timeout),
                headers={'User-Agent': self.user_agent},
                auth=self.auth,
                raise_for_status=False
            )
            if self.auth:
                self.logger.debug("Basic authentication enabled")
            self.logger.debug(f"WebFetcher session started (timeout={self.request_timeout}s)")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("WebFetcher session closed")

    async def head(self, url: str) -> FetchResult:
        """Probe a URL with HEAD, following redirects."""
        self._ensure_session()
        self.stats['head_requests'] += 1

        try:
            async with self.session.head(url, allow_redirects=True) as response:
                result = self._build_result(url, response)
        except Exception:
            self.stats['failed_requests'] += 1
            raise

        self.logger.debug(f"HEAD {url}: {result.status_code} [{result.content_type or 'no content-type'}]")
        return result

    async def get(self, url: str) -> FetchResult:
        """Download a URL with GET, following redirects."""
        self._ensure_session()
        self.stats['get_requests'] += 1

        try:
            async with self.session.get(url, allow_redirects=True) as response:
                result = self._build_result(url, response)
                result.content = await self._read_content_safely(response)
        except Exception:
            self.stats['failed_requests'] += 1
            raise

        size = len(result.content) if result.content else 0
        self.logger.debug(f"GET {url}: {result.status_code} ({size} chars)")
        return result

    def _ensure_session(self):
        if self.session is None:
            raise RuntimeError("WebFetcher.start() must be called before issuing requests")

    def _build_result(self, url: str, response: ClientResponse) -> FetchResult:
        return FetchResult(
            url=url,
            final_url=str(response.url),
            status_code=response.status,
            content_type=response.headers.get('content-type', '').lower(),
            headers=dict(response.headers)
        )

    async def _read_content_safely(self, response: ClientResponse) -> Optional[str]:
        """
        Read response content with a size limit.

        Returns:
            Content string or None if the body exceeds max_content_bytes
        """
        content_length = response.headers.get('content-length')
        if content_length and content_length.isdigit() and int(content_length) > self.max_content_bytes:
            self.logger.warning(f"Content too large ({content_length} bytes): {response.url}")
            return None

        content_bytes = b''
        async for chunk in response.content.iter_chunked(8192):
            content_bytes += chunk
            if len(content_bytes) > self.max_content_bytes:
                self.logger.warning(f"Content exceeded size limit during reading: {response.url}")
                return None

        self.stats['total_bytes_downloaded'] += len(content_bytes)

        encoding = response.charset or 'utf-8'
        try:
            return content_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            for fallback_encoding in ['utf-8', 'cp1252']:
                try:
                    return content_bytes.decode(fallback_encoding)
                except UnicodeDecodeError:
                    continue

            # latin-1 maps every byte
            return content_bytes.decode('latin-1')

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()
