"""
Link checker core components.
"""

from .url_frontier import URLFrontier
from .fetcher import WebFetcher, FetchResult
from .parser import LinkExtractor
from .scheduler import LinkCheckScheduler, CrawlStats

__all__ = [
    'URLFrontier',
    'WebFetcher', 'FetchResult',
    'LinkExtractor',
    'LinkCheckScheduler', 'CrawlStats'
]
