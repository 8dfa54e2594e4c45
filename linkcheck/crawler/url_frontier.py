"""
URL Frontier implementation for managing URLs to check.
Holds the FIFO queue of pending URLs and the ledger of claimed URLs.
"""

import logging
from collections import deque
from typing import Deque, Dict, Optional, Set


class URLFrontier:
    """
    Pending URLs plus the visited set used for deduplication.

    Enqueueing is optimistic and never checks uniqueness; ownership of a URL
    is only granted by claim(). None of the methods suspend, so on a single
    event loop each call is atomic with respect to every other task.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.queue: Deque[str] = deque()
        self.visited: Set[str] = set()
        self.total_enqueued = 0
        self.duplicate_claims = 0

    def enqueue(self, url: str):
        """Append a URL to the back of the queue."""
        self.queue.append(url)
        self.total_enqueued += 1

    def dequeue(self) -> Optional[str]:
        """Pop the oldest queued URL, or None if the queue is empty."""
        if not self.queue:
            return None
        return self.queue.popleft()

    def claim(self, url: str) -> bool:
        """
        Test-and-insert a URL into the visited set.

        Returns True if the caller now owns processing of the URL,
        False if another task claimed it first.
        """
        if url in self.visited:
            self.duplicate_claims += 1
            self.logger.debug(f"URL already claimed: {url}")
            return False
        self.visited.add(url)
        return True

    def is_visited(self, url: str) -> bool:
        return url in self.visited

    def is_empty(self) -> bool:
        return not self.queue

    def __len__(self) -> int:
        return len(self.queue)

    def get_stats(self) -> Dict[str, int]:
        """Get frontier statistics."""
        return {
            'total_queued': len(self.queue),
            'total_enqueued': self.total_enqueued,
            'total_claimed': len(self.visited),
            'duplicate_claims': self.duplicate_claims
        }
