"""RAG answer domain models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ContextEntry:
    """Entry handed to answer generation. Position defines citation number."""
    entry_id: str
    body: str
    date: datetime
    relevance_score: float
    snippet: str
    title: Optional[str] = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Citation:
    """Reference from an answer back to a context entry."""
    entry_id: str
    entry_date: datetime
    snippet: str
    relevance_score: float
    citation_number: int
    entry_title: Optional[str] = None


@dataclass(frozen=True)
class RagResponse:
    """Answer to a single question."""
    answer: str
    citations: list[Citation]
    context_used: list[ContextEntry]
    confidence: float
    processing_time_ms: int
    model_used: str
    conversation_id: str
    message_id: str
