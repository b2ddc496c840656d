"""Core business services."""
from .embedding_service import EmbeddingService
from .lexical_search import LexicalSearcher
from .semantic_search import SemanticSearcher
from .search_service import SearchService
from .context_service import ContextBuilder
from .answer_service import AnswerGenerator
from .rag_service import RagService

__all__ = [
    "EmbeddingService",
    "LexicalSearcher",
    "SemanticSearcher",
    "SearchService",
    "ContextBuilder",
    "AnswerGenerator",
    "RagService",
]
