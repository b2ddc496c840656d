"""Search service - full-text, semantic and hybrid retrieval."""

import logging
from typing import Optional

from ..models.search import SearchFilters, SearchResult, SearchType
from ..strategies.filtering import apply_filters
from ..strategies.fusion import DEFAULT_RRF_K, reciprocal_rank_fusion
from .lexical_search import LexicalSearcher
from .semantic_search import SemanticSearcher

logger = logging.getLogger(__name__)


class SearchService:
    """Search service combining lexical and semantic rankings."""

    def __init__(
        self,
        lexical: LexicalSearcher,
        semantic: SemanticSearcher,
        rrf_k: float = DEFAULT_RRF_K,
    ):
        """Initialize search service.

        Args:
            lexical: Full-text searcher.
            semantic: Embedding searcher.
            rrf_k: Reciprocal Rank Fusion constant.
        """
        self._lexical = lexical
        self._semantic = semantic
        self._rrf_k = rrf_k

    async def search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 10,
        search_type: SearchType = SearchType.HYBRID,
    ) -> list[SearchResult]:
        """Search entries.

        Args:
            query: Search query.
            filters: Optional constraints.
            limit: Max results.
            search_type: Retrieval mode.

        Returns:
            Results sorted by descending score.

        Raises:
            EntryStoreError: The entry store failed.
        """
        if not query.strip():
            return []

        if search_type == SearchType.FULL_TEXT:
            results = await self._lexical.search(query, filters, limit)
            return apply_filters(results, filters, limit)

        if search_type == SearchType.SEMANTIC:
            results = await self._semantic.search(query, filters, limit)
            return apply_filters(results, filters, limit)

        return await self.hybrid_search(query, filters, limit)

    async def hybrid_search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        limit: int = 10,
    ) -> list[SearchResult]:
        """Lexical + semantic search merged with Reciprocal Rank Fusion.

        ``min_score`` applies to the fused score, which is normalized to [0, 1].
        """
        lexical_results = await self._lexical.search(query, filters, limit * 2)
        vector_results = await self._semantic.search(query, filters, limit * 2)

        fused = reciprocal_rank_fusion(lexical_results, vector_results, self._rrf_k)
        results = apply_filters(fused, filters, limit)

        logger.info(
            f"Hybrid: {len(lexical_results)} lexical, {len(vector_results)} vector "
            f"-> {len(results)}/{limit} for '{query[:50]}...'"
        )
        return results
