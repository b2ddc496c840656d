"""Journal entry domain models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Entry:
    """Journal entry as returned by the entry store."""
    id: str
    body: str
    date: datetime
    source_path: str
    source_type: str
    title: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    snippet: str = ""
    relevance_score: Optional[float] = None  # set by store text search only

    @property
    def embedding_text(self) -> str:
        """Text used to embed the entry (title + body)."""
        return f"{self.title or ''} {self.body}"
