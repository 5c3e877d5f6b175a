"""Discard stale results from overlapping search-as-you-type calls."""
import asyncio
import itertools
import logging
from typing import List, Optional

from booksearch.config import Config
from booksearch.models import CandidateBook

logger = logging.getLogger(__name__)


class SearchRequestTracker:
    """Hands out increasing request ids and remembers the latest one."""
    
    def __init__(self):
        self._counter = itertools.count(1)
        self.latest = 0
    
    def next_id(self) -> int:
        self.latest = next(self._counter)
        return self.latest
    
    def is_current(self, request_id: int) -> bool:
        return request_id == self.latest


class DebouncedSearch:
    """
    Debounced front end for an aggregation service.
    
    Each submit waits ``delay`` seconds before searching. A submit that has
    been superseded by a newer one, either while waiting or while its search
    was running, resolves to None instead of a result list.
    """
    
    def __init__(self, service, delay: Optional[float] = None):
        """
        Args:
            service: Object with an async ``search(text)`` method
            delay: Debounce delay in seconds; defaults to SEARCH_DEBOUNCE_MS
        """
        self.service = service
        if delay is None:
            delay = Config.SEARCH_DEBOUNCE_MS / 1000
        self.delay = delay
        self.tracker = SearchRequestTracker()
    
    async def submit(self, text: str) -> Optional[List[CandidateBook]]:
        request_id = self.tracker.next_id()
        
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if not self.tracker.is_current(request_id):
            logger.debug(f"Request {request_id} superseded before search")
            return None
        
        results = await self.service.search(text)
        if not self.tracker.is_current(request_id):
            logger.debug(f"Discarding stale results for request {request_id}")
            return None
        return results
