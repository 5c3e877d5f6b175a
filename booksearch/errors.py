"""Exception hierarchy for catalog and datastore failures."""
from typing import Optional


class SearchError(Exception):
    """Base exception for search branch failures."""
    
    kind = "SearchError"


class CatalogError(SearchError):
    """Raised when a remote catalog query fails."""
    
    kind = "CatalogError"


class CatalogTimeout(CatalogError):
    """Raised when the catalog does not answer within the timeout."""
    
    kind = "Timeout"


class RateLimited(CatalogError):
    """Raised when the catalog responds with HTTP 429."""
    
    kind = "RateLimited"
    
    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamUnavailable(CatalogError):
    """Raised when the catalog responds with HTTP 5xx."""
    
    kind = "UpstreamUnavailable"
    
    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class UpstreamRejected(CatalogError):
    """Raised for any other non-2xx catalog response."""
    
    kind = "UpstreamRejected"
    
    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class NetworkError(CatalogError):
    """Raised on connection-level failures."""
    
    kind = "NetworkError"


class MalformedResponse(CatalogError):
    """Raised when the catalog body cannot be parsed."""
    
    kind = "MalformedResponse"


class DatastoreUnavailable(SearchError):
    """Raised when the local library datastore cannot be queried."""
    
    kind = "DatastoreUnavailable"
