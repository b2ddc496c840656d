import logging
from typing import Optional

import numpy as np
from openai import AsyncOpenAI, APIError

from journal_rag.core.models.provider import (
    EmbeddingResult,
    ProviderError,
    ProviderErrorKind,
)
from journal_rag.infrastructure.openai_errors import (
    is_placeholder_key,
    provider_error_from_exception,
)

logger = logging.getLogger(__name__)


def _resolve_model(model: Optional[str], default: str) -> str:
    if not model or model == "default":
        return default
    return model


async def _create_embedding(
    client: AsyncOpenAI, provider: str, text: str, model: str
) -> EmbeddingResult:
    try:
        response = await client.embeddings.create(input=text, model=model)
    except APIError as e:
        error = provider_error_from_exception(provider, e)
        logger.warning(f"Embedding request failed ({error})")
        return EmbeddingResult.failure(error)

    if not response.data or not response.data[0].embedding:
        return EmbeddingResult.failure(
            ProviderError(provider, ProviderErrorKind.BAD_RESPONSE, "empty embedding")
        )

    vector = np.asarray(response.data[0].embedding, dtype=np.float32)
    return EmbeddingResult(vector=vector, model=model)


class OllamaEmbedder:
    """Embeddings from a local Ollama server (OpenAI-compatible API)."""

    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "nomic-embed-text",
        timeout: float = 30.0,
    ):
        self._client = AsyncOpenAI(
            base_url=base_url, api_key="ollama", timeout=timeout, max_retries=0
        )
        self._model = model

    async def embed(self, text: str, model: Optional[str] = None) -> EmbeddingResult:
        return await _create_embedding(
            self._client, self.name, text, _resolve_model(model, self._model)
        )


class OpenAIEmbedder:
    """Embeddings from the OpenAI API."""

    name = "openai"

    def __init__(
        self,
        api_key: str = "",
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
        timeout: float = 30.0,
    ):
        self._configured = not is_placeholder_key(api_key)
        self._client = (
            AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=1)
            if self._configured
            else None
        )
        self._model = model

    async def embed(self, text: str, model: Optional[str] = None) -> EmbeddingResult:
        if self._client is None:
            return EmbeddingResult.failure(
                ProviderError(self.name, ProviderErrorKind.NOT_CONFIGURED, "OPENAI_API_KEY not set")
            )
        return await _create_embedding(
            self._client, self.name, text, _resolve_model(model, self._model)
        )
