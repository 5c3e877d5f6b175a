"""Aggregate catalog and library searches into one candidate list."""
import asyncio
import logging
from typing import List, Optional, Awaitable, Sequence, TypeVar

from booksearch.async_client import RemoteCatalogClient
from booksearch.database import LocalInventoryClient
from booksearch.errors import SearchError
from booksearch.merge import RemoteResultMerger
from booksearch.models import (
    CandidateBook,
    LocalRecord,
    RemoteDocument,
    DEFAULT_AUTHOR,
    DEFAULT_PAGE_COUNT,
    MAX_RESULTS,
    ORIGIN_LOCAL,
    ORIGIN_REMOTE,
    normalized_identity,
)
from booksearch.parse import get_cover_image_url

logger = logging.getLogger(__name__)

T = TypeVar("T")


def local_to_candidate(record: LocalRecord) -> CandidateBook:
    """Wrap a library record; local data is used as-is."""
    return CandidateBook(
        title=record.title,
        author=record.author,
        page_count=record.page_count,
        cover_url=record.cover_url,
        origin=ORIGIN_LOCAL,
        already_owned=True,
        local_id=record.id
    )


def remote_to_candidate(document: RemoteDocument) -> CandidateBook:
    """Convert a catalog document, filling in missing fields."""
    return CandidateBook(
        title=document.title,
        author=document.first_author or DEFAULT_AUTHOR,
        page_count=document.page_count_median or DEFAULT_PAGE_COUNT,
        cover_url=get_cover_image_url(document.cover_id),
        origin=ORIGIN_REMOTE,
        already_owned=False
    )


class AggregationService:
    """
    Single entry point for book discovery.
    
    Queries the catalog by author and generally, and the user's library,
    concurrently. A failing branch contributes no results instead of failing
    the search.
    """
    
    def __init__(
        self,
        catalog: RemoteCatalogClient,
        inventory: Optional[LocalInventoryClient] = None,
        merger: Optional[RemoteResultMerger] = None,
        limit: int = MAX_RESULTS
    ):
        """
        Args:
            catalog: Remote catalog client
            inventory: Library client; when None only the catalog is searched
            merger: Remote result merger
            limit: Maximum number of candidates returned
        """
        self.catalog = catalog
        self.inventory = inventory
        self.merger = merger or RemoteResultMerger(limit)
        self.limit = limit
    
    async def search(self, text: str) -> List[CandidateBook]:
        """
        Search the catalog and library for books matching text.
        
        Args:
            text: Free-text query
        
        Returns:
            Owned books first, then catalog books not already owned,
            at most ``limit`` entries. Never raises for branch failures.
        """
        if not text or not text.strip():
            return []
        
        author_results, general_results, local_results = await asyncio.gather(
            self._branch("author", self.catalog.query_by_author(text)),
            self._branch("general", self.catalog.query_general(text)),
            self._branch("local", self._search_local(text)),
        )
        
        remote = self.merger.merge(author_results, general_results)
        candidates = self.reconcile(local_results, remote)
        
        logger.info(
            f"Search '{text}': {len(local_results)} local, "
            f"{len(author_results)} by author, {len(general_results)} general "
            f"-> {len(candidates)} candidates"
        )
        return candidates
    
    def search_sync(self, text: str) -> List[CandidateBook]:
        """Blocking wrapper around :meth:`search`."""
        return asyncio.run(self.search(text))
    
    def reconcile(
        self,
        local_records: Sequence[LocalRecord],
        remote_documents: Sequence[RemoteDocument]
    ) -> List[CandidateBook]:
        """
        Combine library and catalog results.
        
        Catalog documents matching an owned book by normalized title and
        first author are dropped in favor of the owned book.
        """
        candidates = [local_to_candidate(record) for record in local_records]
        owned = {normalized_identity(r.title, r.author) for r in local_records}
        
        for document in remote_documents:
            identity = normalized_identity(document.title, document.first_author)
            if identity in owned:
                continue
            candidates.append(remote_to_candidate(document))
        
        return candidates[:self.limit]
    
    async def _search_local(self, text: str) -> List[LocalRecord]:
        if self.inventory is None:
            return []
        return await self.inventory.search(text)
    
    async def _branch(self, name: str, call: Awaitable[List[T]]) -> List[T]:
        try:
            return list(await call)
        except SearchError as e:
            logger.warning(f"{name} branch failed ({e.kind}): {e}")
        except Exception as e:
            logger.error(f"{name} branch failed unexpectedly: {e}", exc_info=True)
        return []
