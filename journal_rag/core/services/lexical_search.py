"""Lexical search - full-text index queries."""

import asyncio
import logging
from typing import Optional

from ..models.search import Provenance, SearchFilters, SearchResult
from ..protocols.entry_store import EntryStoreProtocol
from ..strategies.filtering import apply_filters
from ..strategies.scoring import generate_snippet, lexical_score

logger = logging.getLogger(__name__)


class LexicalSearcher:
    """Ranks entries through the store's full-text index."""

    def __init__(self, store: EntryStoreProtocol, snippet_length: int = 200):
        self._store = store
        self._snippet_length = snippet_length

    async def search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 10,
    ) -> list[SearchResult]:
        """Full-text search.

        Fetches ``2 * limit`` candidates so filtering still leaves ``limit``.
        Store errors propagate.
        """
        entries = await asyncio.to_thread(self._store.search, query, limit * 2)

        results = []
        for entry in entries:
            score = (
                entry.relevance_score
                if entry.relevance_score is not None
                else lexical_score(entry.body, entry.title, query)
            )
            snippet = entry.snippet or generate_snippet(entry.body, query, self._snippet_length)
            results.append(
                SearchResult.from_entry(entry, score, Provenance.LEXICAL, snippet)
            )

        structural = filters.without_min_score() if filters else None
        results = apply_filters(results, structural, limit)

        logger.info(f"Lexical: {len(results)}/{len(entries)} hits for '{query[:50]}'")
        return results
