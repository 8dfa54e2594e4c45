"""
URL normalization helpers shared by the frontier, parser and scheduler.

URLs go through yarl, the same URL type aiohttp reports final URLs with, so
hosts are compared in their IDNA (punycode) form everywhere.
"""

from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from yarl import URL

HTTP_SCHEMES = ('http', 'https')


def normalize_url(url: str) -> str:
    """
    Normalize an absolute URL into its crawl identity.
    
    The fragment is removed, scheme and host are lowercased (the host is
    IDNA-encoded) and an empty path becomes '/'. Raises ValueError when the
    URL cannot be parsed.
    """
    normalized = str(URL(url.strip()).with_fragment(None))
    parts = urlsplit(normalized)
    return urlunsplit(parts._replace(scheme=parts.scheme.lower(), path=parts.path or '/'))


def get_hostname(url: str) -> Optional[str]:
    """Return the lowercased, IDNA-encoded hostname of a URL, or None if it has none."""
    return URL(url).raw_host


def is_http_url(url: str) -> bool:
    """Check that a URL is absolute and uses http or https."""
    parsed = URL(url)
    return parsed.scheme.lower() in HTTP_SCHEMES and bool(parsed.raw_host)
