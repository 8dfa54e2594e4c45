"""
HTML link extraction for discovering pages to check.
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..utils.url import get_hostname, is_http_url, normalize_url


class LinkExtractor:
    """
    Extracts absolute, fragment-free anchor targets from HTML documents.

    Extraction is a pure function of (html, page_url): calling it twice with
    the same inputs yields the same list of links.
    """

    def __init__(self, base_host: str, logger: Optional[logging.Logger] = None):
        self.base_host = base_host.lower()
        self.logger = logger or logging.getLogger(__name__)

    def extract_links(self, html_content: str, page_url: str,
                      include_external: bool = False) -> List[str]:
        """
        Extract and normalize the links of a page.

        Args:
            html_content: Raw HTML content
            page_url: Final URL of the page, used to resolve relative hrefs
            include_external: Also keep http(s) links that leave the base host

        Returns:
            Deduplicated links in document order
        """
        soup = BeautifulSoup(html_content, 'lxml')
        links: Dict[str, None] = {}

        for anchor in soup.find_all('a', href=True):
            href = anchor['href'].strip()
            if not href or href.startswith('#'):
                continue

            try:
                absolute_url = normalize_url(urljoin(page_url, href))
            except ValueError as e:
                self.logger.debug(f"Could not resolve link {href!r} on {page_url}: {e}")
                continue

            if not is_http_url(absolute_url):
                continue

            if not include_external and not self.is_internal(absolute_url):
                continue

            links.setdefault(absolute_url, None)

        self.logger.debug(f"Extracted {len(links)} links from {page_url}")
        return list(links)

    def is_internal(self, url: str) -> bool:
        """Check whether a URL belongs to the base host."""
        return get_hostname(url) == self.base_host
