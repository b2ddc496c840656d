"""Embedding service - provider calls with timeout and synthetic fallback."""

import asyncio
import logging
from typing import Optional

from ..models.provider import EmbeddingResult, ProviderError, ProviderErrorKind
from ..protocols.embedder import EmbedderProtocol

logger = logging.getLogger(__name__)

FALLBACK_EMBEDDING_MODEL = "mock-embedding"


class EmbeddingService:
    """Embeds text through the configured provider."""

    def __init__(
        self,
        provider: EmbedderProtocol,
        model: Optional[str] = None,
        timeout: float = 30.0,
        concurrency: int = 8,
        synthetic_fallback: bool = True,
        fallback_dimension: int = 768,
    ):
        """Initialize embedding service.

        Args:
            provider: Embedding provider.
            model: Model hint passed to the provider.
            timeout: Per-call timeout in seconds.
            concurrency: Max concurrent provider calls in ``embed_many``.
            synthetic_fallback: Substitute a deterministic synthetic vector
                when the provider fails.
            fallback_dimension: Dimension of synthetic vectors.
        """
        self._provider = provider
        self._model = model
        self._timeout = timeout
        self._concurrency = max(1, concurrency)
        self._synthetic_fallback = synthetic_fallback
        self._fallback_dimension = fallback_dimension

    @property
    def provider_name(self) -> str:
        return self._provider.name

    async def _call_provider(self, text: str) -> EmbeddingResult:
        try:
            return await asyncio.wait_for(
                self._provider.embed(text, self._model), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            return EmbeddingResult.failure(
                ProviderError(
                    self._provider.name,
                    ProviderErrorKind.TIMEOUT,
                    f"no response after {self._timeout}s",
                )
            )
        except Exception as e:
            logger.error(f"[{self._provider.name}] Embedding call raised: {e}")
            return EmbeddingResult.failure(
                ProviderError(self._provider.name, ProviderErrorKind.UNAVAILABLE, str(e)[:200])
            )

    async def embed(self, text: str) -> EmbeddingResult:
        """Embed text; never raises for provider problems."""
        result = await self._call_provider(text)
        if result.ok or not self._synthetic_fallback:
            return result

        from journal_rag.infrastructure.embeddings.mock import generate_mock_embedding

        logger.warning(f"Embedding provider failed ({result.error}), using synthetic vector")
        return EmbeddingResult(
            vector=generate_mock_embedding(text, self._fallback_dimension),
            model=FALLBACK_EMBEDDING_MODEL,
            error=None,
            fallback=True,
        )

    async def embed_many(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed texts concurrently (bounded); results keep input order."""
        semaphore = asyncio.Semaphore(self._concurrency)

        async def _embed_one(text: str) -> EmbeddingResult:
            async with semaphore:
                return await self.embed(text)

        return list(await asyncio.gather(*(_embed_one(t) for t in texts)))
