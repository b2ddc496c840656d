"""Domain models."""
from .entry import Entry
from .search import SearchResult, SearchFilters, RankedEntry, Provenance, SearchType
from .rag import ContextEntry, Citation, RagResponse
from .provider import (
    Provider,
    ProviderError,
    ProviderErrorKind,
    EmbeddingResult,
    CompletionResult,
)

__all__ = [
    "Entry",
    "SearchResult",
    "SearchFilters",
    "RankedEntry",
    "Provenance",
    "SearchType",
    "ContextEntry",
    "Citation",
    "RagResponse",
    "Provider",
    "ProviderError",
    "ProviderErrorKind",
    "EmbeddingResult",
    "CompletionResult",
]
