"""
Per-URL crawl results and the aggregator that collects them during a run.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union


@dataclass
class CrawlResult:
    """Outcome of checking a single URL."""
    url: str
    status: Union[int, str]
    is_external: bool = False
    
    @property
    def ok(self) -> bool:
        """A result passes when it carries a numeric status below 400."""
        return isinstance(self.status, int) and self.status < 400
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'url': self.url,
            'status': self.status,
            'is_external': self.is_external,
            'ok': self.ok
        }


class ResultStore:
    """
    Maps each finally-resolved URL to its CrawlResult.
    
    A later write for the same URL replaces the earlier one. Under correct
    claim discipline this only happens when a page was probed successfully
    and a later step of the same task failed.
    """
    
    def __init__(self):
        self.results: Dict[str, CrawlResult] = {}
        self.overwrites = 0
        self.logger = logging.getLogger(__name__)
    
    def record(self, result: CrawlResult):
        """Store a result, replacing any previous entry for its URL."""
        previous = self.results.get(result.url)
        if previous is not None:
            self.overwrites += 1
            self.logger.debug(
                f"Replacing result for {result.url}: [{previous.status}] -> [{result.status}]"
            )
        self.results[result.url] = result
    
    def get(self, url: str) -> Optional[CrawlResult]:
        return self.results.get(url)
    
    def sorted(self) -> List[CrawlResult]:
        """Return all results ordered lexicographically by URL."""
        return [self.results[url] for url in sorted(self.results)]
    
    def summary(self) -> Dict[str, int]:
        """Count results by outcome and origin."""
        values = list(self.results.values())
        return {
            'total': len(values),
            'ok': sum(1 for r in values if r.ok),
            'failed': sum(1 for r in values if not r.ok),
            'internal': sum(1 for r in values if not r.is_external),
            'external': sum(1 for r in values if r.is_external)
        }
    
    def __contains__(self, url: str) -> bool:
        return url in self.results
    
    def __len__(self) -> int:
        return len(self.results)
    
    def __iter__(self) -> Iterator[CrawlResult]:
        return iter(self.sorted())
