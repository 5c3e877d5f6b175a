"""Parse and normalize Open Library search responses."""
import logging
from typing import Dict, Any, List, Optional, Iterable

from booksearch.errors import MalformedResponse
from booksearch.models import RemoteDocument

logger = logging.getLogger(__name__)

COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"
PLACEHOLDER_COVER_URL = "https://via.placeholder.com/300x400?text=No+Cover"


def get_cover_image_url(cover_id: Optional[int]) -> str:
    """
    Build a cover image URL for an Open Library cover id.
    
    Args:
        cover_id: Open Library cover id (``cover_i``)
    
    Returns:
        Cover URL, or a placeholder URL when no cover is known
    """
    if not cover_id or cover_id <= 0:
        return PLACEHOLDER_COVER_URL
    return COVER_URL_TEMPLATE.format(cover_id=cover_id)


def _positive_int(value: Any) -> Optional[int]:
    # bool is an int subclass; treat it as garbage
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value


def parse_document(doc: Dict[str, Any]) -> Optional[RemoteDocument]:
    """
    Parse a single doc from an Open Library search response.
    
    Args:
        doc: Single entry of the response's ``docs`` list
    
    Returns:
        RemoteDocument, or None if the doc has no key or title
    """
    if not isinstance(doc, dict):
        return None
    
    key = doc.get("key")
    title = doc.get("title")
    if not isinstance(key, str) or not key:
        return None
    if not isinstance(title, str) or not title.strip():
        return None
    
    authors = doc.get("author_name") or []
    if not isinstance(authors, list):
        authors = []
    author_names = tuple(a for a in authors if isinstance(a, str) and a.strip())
    
    pages = _positive_int(doc.get("number_of_pages_median"))
    
    return RemoteDocument(
        catalog_key=key,
        title=title,
        author_names=author_names,
        cover_id=_positive_int(doc.get("cover_i")),
        page_count_median=pages,
    )


def parse_search_response(response_json: Any) -> List[RemoteDocument]:
    """
    Parse a full Open Library search response.
    
    Args:
        response_json: Decoded JSON body
    
    Returns:
        List of RemoteDocument objects, in response order
    
    Raises:
        MalformedResponse: If the body has no ``docs`` list
    """
    if not isinstance(response_json, dict):
        raise MalformedResponse("Search response is not a JSON object")
    
    docs = response_json.get("docs")
    if docs is None:
        return []
    if not isinstance(docs, list):
        raise MalformedResponse("Search response 'docs' is not a list")
    
    documents = []
    for doc in docs:
        document = parse_document(doc)
        if document:
            documents.append(document)
        else:
            logger.warning(f"Skipping malformed catalog doc: {doc!r}")
    
    return documents


def deduplicate_documents(documents: Iterable[RemoteDocument]) -> List[RemoteDocument]:
    """
    Remove duplicate documents by catalog key, keeping the first seen.
    
    Args:
        documents: Documents in priority order
    
    Returns:
        Deduplicated list of documents
    """
    seen_keys = set()
    unique_documents = []
    
    for document in documents:
        if document.catalog_key not in seen_keys:
            seen_keys.add(document.catalog_key)
            unique_documents.append(document)
    
    return unique_documents
