"""Data models for book search results."""
from dataclasses import dataclass, asdict, field
from typing import Optional, Tuple, Dict, Any

DEFAULT_AUTHOR = "Unknown Author"
DEFAULT_PAGE_COUNT = 200
MAX_RESULTS = 10

ORIGIN_LOCAL = "local"
ORIGIN_REMOTE = "remote"


@dataclass(frozen=True)
class RemoteDocument:
    """Canonical book document returned by the remote catalog."""
    catalog_key: str
    title: str
    author_names: Tuple[str, ...] = field(default_factory=tuple)
    cover_id: Optional[int] = None
    page_count_median: Optional[int] = None
    
    def __post_init__(self):
        if not self.catalog_key:
            raise ValueError("RemoteDocument requires a catalog key")
        if not self.title or not self.title.strip():
            raise ValueError("RemoteDocument requires a non-empty title")
    
    @property
    def first_author(self) -> Optional[str]:
        """First listed author, if any."""
        return self.author_names[0] if self.author_names else None


@dataclass(frozen=True)
class LocalRecord:
    """A book already in the user's library."""
    id: int
    title: str
    author: str
    page_count: int
    cover_url: str


@dataclass(frozen=True)
class CandidateBook:
    """Display-ready search result, tagged with origin and ownership."""
    title: str
    author: str
    page_count: int
    cover_url: str
    origin: str
    already_owned: bool
    local_id: Optional[int] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def normalized_identity(title: str, author: Optional[str]) -> Tuple[str, str]:
    """
    Build the (title, author) key used to match remote and local books.
    
    Args:
        title: Book title
        author: Author name, or None when unknown
    
    Returns:
        Lower-cased, trimmed (title, author) pair
    """
    return (title.strip().lower(), (author or "").strip().lower())
