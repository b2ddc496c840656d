import asyncio
import logging
from functools import cached_property
from typing import Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from journal_rag.core.models.provider import (
    EmbeddingResult,
    ProviderError,
    ProviderErrorKind,
)

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """In-process embeddings with a sentence-transformers model."""

    name = "local"

    def __init__(self, model_name: str = "intfloat/multilingual-e5-base"):
        self._model_name = model_name

    @cached_property
    def model(self) -> SentenceTransformer:
        logger.info(f"Loading embedding model: {self._model_name}")
        return SentenceTransformer(self._model_name)

    def warmup(self) -> None:
        _ = self.model
        logger.info("Embedding model warmed up")

    def _encode(self, text: str) -> np.ndarray:
        return self.model.encode(text, convert_to_numpy=True)

    async def embed(self, text: str, model: Optional[str] = None) -> EmbeddingResult:
        try:
            vector = await asyncio.to_thread(self._encode, text)
        except (OSError, RuntimeError, ValueError) as e:
            logger.warning(f"Local embedding failed: {e}")
            return EmbeddingResult.failure(
                ProviderError(self.name, ProviderErrorKind.UNAVAILABLE, str(e)[:200])
            )
        return EmbeddingResult(vector=np.asarray(vector, dtype=np.float32), model=self._model_name)
