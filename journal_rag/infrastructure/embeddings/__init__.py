"""Embedding provider implementations."""
from .mock import MockEmbedder, generate_mock_embedding
from .openai_embedder import OllamaEmbedder, OpenAIEmbedder

__all__ = ["MockEmbedder", "generate_mock_embedding", "OllamaEmbedder", "OpenAIEmbedder"]
