"""Embedder protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.provider import EmbeddingResult


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for embedding providers."""

    name: str

    async def embed(self, text: str, model: Optional[str] = None) -> EmbeddingResult:
        """Embed a single text.

        Args:
            text: Text to embed.
            model: Model hint. None or "default" selects the provider default.

        Returns:
            Embedding result. Provider problems are reported through
            ``EmbeddingResult.error``, never raised.
        """
        ...
