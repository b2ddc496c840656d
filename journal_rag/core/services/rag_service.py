"""RAG service - answers questions from journal entries."""

import logging
import time
import uuid
from datetime import datetime
from typing import Iterable, Optional

from ..models.provider import Provider
from ..models.rag import RagResponse
from ..models.search import SearchFilters
from .answer_service import AnswerGenerator
from .citation_service import calculate_confidence
from .context_service import ContextBuilder
from .search_service import SearchService

logger = logging.getLogger(__name__)


class RagService:
    """Retrieval-augmented question answering.

    Flow:
        1. Hybrid search (lexical + semantic, fused with RRF) and filtering
        2. Numbered context assembly
        3. Grounded generation (templated fallback on provider failure)
        4. Citation extraction and confidence scoring
    """

    def __init__(
        self,
        search_service: SearchService,
        answer_generator: AnswerGenerator,
        context_builder: Optional[ContextBuilder] = None,
        min_score: float = 0.3,
        default_max_context_entries: int = 5,
    ):
        """Initialize RAG service.

        Args:
            search_service: Search service.
            answer_generator: Answer generator.
            context_builder: Context assembler.
            min_score: Minimum fused relevance for context entries.
            default_max_context_entries: Context size when not given.
        """
        self._search = search_service
        self._generator = answer_generator
        self._context_builder = context_builder or ContextBuilder()
        self._min_score = min_score
        self._default_max_context_entries = default_max_context_entries

    async def answer_question(
        self,
        question: str,
        conversation_id: Optional[str] = None,
        max_context_entries: Optional[int] = None,
        date_range: Optional[tuple[datetime, datetime]] = None,
        tags: Optional[Iterable[str]] = None,
        provider: Provider | str = Provider.OLLAMA,
        model: str = "default",
    ) -> RagResponse:
        """Answer a question with citations.

        Args:
            question: Free-text question.
            conversation_id: Existing conversation to attach to, else a new one.
            max_context_entries: Max entries given to the model.
            date_range: Inclusive entry date bounds; naive values are UTC.
            tags: Entries must carry at least one of these tags.
            provider: Completion provider.
            model: Model name, "default" for the provider default.

        Returns:
            RAG response.

        Raises:
            EntryStoreError: The entry store failed.
        """
        start = time.perf_counter()
        limit = (
            self._default_max_context_entries
            if max_context_entries is None
            else max_context_entries
        )

        filters = SearchFilters(
            date_range=date_range,
            tags=frozenset(tags) if tags else None,
            min_score=self._min_score,
        )

        results = await self._search.hybrid_search(question, filters, limit)
        context = self._context_builder.build(results)

        generated = await self._generator.generate(question, context, provider, model)
        confidence = calculate_confidence(generated.text, context)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            f"RAG: context={len(context)} citations={len(generated.citations)} "
            f"confidence={confidence:.2f} model={generated.model_used} ({elapsed_ms} ms)"
        )

        return RagResponse(
            answer=generated.text,
            citations=generated.citations,
            context_used=context,
            confidence=confidence,
            processing_time_ms=elapsed_ms,
            model_used=generated.model_used,
            conversation_id=conversation_id or str(uuid.uuid4()),
            message_id=str(uuid.uuid4()),
        )
