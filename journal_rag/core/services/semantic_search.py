"""Semantic search - embedding similarity with keyword fallback."""

import asyncio
import logging
from typing import Optional

from ..models.entry import Entry
from ..models.search import Provenance, SearchFilters, SearchResult
from ..protocols.entry_store import EntryStoreProtocol
from ..strategies.filtering import apply_filters
from ..strategies.scoring import cosine_similarity, generate_snippet, keyword_similarity
from .embedding_service import EmbeddingService

logger = logging.getLogger(__name__)


class SemanticSearcher:
    """Ranks entries by cosine similarity of embeddings.

    When the query cannot be embedded by a real provider the searcher
    switches to keyword/co-occurrence scoring. Both paths tag results as
    ``vector``.
    """

    def __init__(
        self,
        store: EntryStoreProtocol,
        embeddings: EmbeddingService,
        similarity_threshold: float = 0.1,
        keyword_threshold: float = 0.3,
        candidate_factor: int = 5,
        keyword_candidate_factor: int = 3,
        snippet_length: int = 200,
    ):
        """Initialize semantic searcher.

        Args:
            store: Entry store.
            embeddings: Embedding service.
            similarity_threshold: Minimum cosine similarity to keep.
            keyword_threshold: Minimum keyword similarity to keep.
            candidate_factor: Candidates scanned per requested result.
            keyword_candidate_factor: Same, for the keyword fallback.
            snippet_length: Max snippet length.
        """
        self._store = store
        self._embeddings = embeddings
        self._similarity_threshold = similarity_threshold
        self._keyword_threshold = keyword_threshold
        self._candidate_factor = candidate_factor
        self._keyword_candidate_factor = keyword_candidate_factor
        self._snippet_length = snippet_length

    def _to_result(self, entry: Entry, score: float, query: str) -> SearchResult:
        snippet = generate_snippet(entry.body, query, self._snippet_length)
        return SearchResult.from_entry(entry, score, Provenance.VECTOR, snippet)

    def _finalize(
        self,
        results: list[SearchResult],
        filters: Optional[SearchFilters],
        limit: int,
    ) -> list[SearchResult]:
        results.sort(key=lambda r: r.score, reverse=True)
        structural = filters.without_min_score() if filters else None
        return apply_filters(results, structural, limit)

    async def search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 10,
    ) -> list[SearchResult]:
        """Semantic search over a bounded candidate scan."""
        query_embedding = await self._embeddings.embed(query)
        if not query_embedding.ok or query_embedding.fallback:
            logger.warning(
                f"Query embedding unavailable ({query_embedding.error or 'synthetic fallback'}), "
                "using keyword similarity"
            )
            return await self.keyword_search(query, filters, limit)

        entries = await asyncio.to_thread(self._store.list, limit * self._candidate_factor)
        entry_embeddings = await self._embeddings.embed_many(
            [entry.embedding_text for entry in entries]
        )

        results = []
        skipped = 0
        for entry, embedding in zip(entries, entry_embeddings):
            if not embedding.ok or embedding.fallback:
                skipped += 1
                continue

            similarity = cosine_similarity(query_embedding.vector, embedding.vector)
            if similarity > self._similarity_threshold:
                results.append(self._to_result(entry, similarity, query))

        if skipped:
            logger.warning(f"Semantic: skipped {skipped} entries without embeddings")

        results = self._finalize(results, filters, limit)
        logger.info(
            f"Semantic: {len(results)}/{len(entries)} candidates for '{query[:50]}'"
        )
        return results

    async def keyword_search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 10,
    ) -> list[SearchResult]:
        """Keyword/co-occurrence similarity used without embeddings."""
        entries = await asyncio.to_thread(
            self._store.list, limit * self._keyword_candidate_factor
        )

        results = []
        for entry in entries:
            score = keyword_similarity(entry.body, entry.title, query)
            if score > self._keyword_threshold:
                results.append(self._to_result(entry, score, query))

        results = self._finalize(results, filters, limit)
        logger.info(
            f"Keyword similarity: {len(results)}/{len(entries)} candidates for '{query[:50]}'"
        )
        return results
