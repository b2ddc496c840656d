"""Protocol interfaces for dependency injection."""
from .embedder import EmbedderProtocol
from .entry_store import EntryStoreError, EntryStoreProtocol
from .llm import LLMProtocol

__all__ = [
    "EmbedderProtocol",
    "EntryStoreProtocol",
    "EntryStoreError",
    "LLMProtocol",
]
