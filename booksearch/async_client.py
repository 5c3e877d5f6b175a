"""Async HTTP client for the Open Library search API."""
import httpx
from typing import List, Optional, Dict, Any
import logging

from booksearch.errors import (
    CatalogTimeout,
    MalformedResponse,
    NetworkError,
    RateLimited,
    UpstreamRejected,
    UpstreamUnavailable,
)
from booksearch.models import RemoteDocument, MAX_RESULTS
from booksearch.parse import parse_search_response

logger = logging.getLogger(__name__)

SEARCH_FIELDS = "key,title,author_name,cover_i,number_of_pages_median"


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if value and value.strip().isdigit():
        return float(value.strip())
    return None


class RemoteCatalogClient:
    """Async client for Open Library book searches."""
    
    BASE_URL = "https://openlibrary.org"
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        limit: int = MAX_RESULTS,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize async client.
        
        Args:
            base_url: Catalog base URL (defaults to Open Library)
            timeout: Request timeout in seconds
            limit: Upstream result limit per query
            client: Pre-built HTTP client; when given, the caller owns it
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.limit = limit
        
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"}
        )
    
    async def query_general(self, text: str) -> List[RemoteDocument]:
        """
        Search across title and author jointly.
        
        Args:
            text: Free-text query
        
        Returns:
            Parsed documents; empty without a request when text is blank
        """
        return await self._search("q", text)
    
    async def query_by_author(self, text: str) -> List[RemoteDocument]:
        """
        Search restricted to the author field.
        
        Args:
            text: Author name or fragment
        
        Returns:
            Parsed documents; empty without a request when text is blank
        """
        return await self._search("author", text)
    
    async def _search(self, field: str, text: str) -> List[RemoteDocument]:
        query = (text or "").strip()
        if not query:
            return []
        
        params = {
            field: query,
            "fields": SEARCH_FIELDS,
            "limit": self.limit
        }
        body = await self._get_json(f"{self.base_url}/search.json", params)
        return parse_search_response(body)
    
    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """
        Perform one GET and classify failures.
        
        Raises:
            CatalogTimeout: No response within the timeout
            RateLimited: HTTP 429
            UpstreamUnavailable: HTTP 5xx
            UpstreamRejected: Any other non-2xx status
            NetworkError: Connection-level failure
            MalformedResponse: Body is not valid JSON
        """
        try:
            logger.info(f"Catalog request: {params}")
            response = await self.client.get(url, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise CatalogTimeout(f"Catalog request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Catalog request failed: {e}") from e
        
        status = response.status_code
        if status == 429:
            raise RateLimited(
                "Catalog rate limit exceeded",
                retry_after=_parse_retry_after(response.headers.get("Retry-After"))
            )
        if status >= 500:
            raise UpstreamUnavailable(f"Catalog server error ({status})", status)
        if not 200 <= status < 300:
            raise UpstreamRejected(f"Catalog rejected request ({status})", status)
        
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"Catalog returned invalid JSON: {e}") from e
    
    async def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
    
    async def __aenter__(self):
        """Async context manager entry."""
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
