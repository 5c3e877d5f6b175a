"""Merge author-focused and general catalog results."""
from typing import Sequence, List

from booksearch.models import RemoteDocument, MAX_RESULTS
from booksearch.parse import deduplicate_documents


class RemoteResultMerger:
    """Combine the two remote queries into one ordered, bounded list."""
    
    def __init__(self, limit: int = MAX_RESULTS):
        self.limit = limit
    
    def merge(
        self,
        author_results: Sequence[RemoteDocument],
        general_results: Sequence[RemoteDocument]
    ) -> List[RemoteDocument]:
        """
        Merge results, author matches first.
        
        A catalog key already seen in the author results shadows any later
        duplicate from the general results. Either input may be empty.
        
        Args:
            author_results: Results of the author-field query
            general_results: Results of the general query
        
        Returns:
            At most ``limit`` documents with unique catalog keys
        """
        merged = deduplicate_documents([*author_results, *general_results])
        return merged[:self.limit]
