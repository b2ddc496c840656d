"""Search domain models."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from .entry import Entry


class Provenance(str, Enum):
    """Retrieval path that produced a result."""
    LEXICAL = "lexical"
    VECTOR = "vector"
    HYBRID = "hybrid"


class SearchType(str, Enum):
    FULL_TEXT = "full_text"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"


@dataclass
class SearchResult:
    """Ranked entry returned by a searcher."""
    id: str
    body: str
    date: datetime
    source_path: str
    source_type: str
    score: float
    provenance: Provenance
    title: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    snippet: str = ""

    @classmethod
    def from_entry(
        cls,
        entry: Entry,
        score: float,
        provenance: Provenance,
        snippet: str,
    ) -> "SearchResult":
        return cls(
            id=entry.id,
            title=entry.title,
            body=entry.body,
            date=entry.date,
            source_path=entry.source_path,
            source_type=entry.source_type,
            tags=list(entry.tags),
            score=score,
            snippet=snippet,
            provenance=provenance,
        )


@dataclass(frozen=True)
class SearchFilters:
    """Caller-supplied constraints. Absent fields impose no constraint."""
    date_range: Optional[tuple[datetime, datetime]] = None
    tags: Optional[frozenset[str]] = None
    source_types: Optional[frozenset[str]] = None
    min_score: Optional[float] = None

    def without_min_score(self) -> "SearchFilters":
        """Structural constraints only (score scales differ per searcher)."""
        return replace(self, min_score=None)


@dataclass
class RankedEntry:
    """Search result during rank fusion."""
    result: SearchResult
    fused_score: float
    lexical_rank: Optional[int] = None
    vector_rank: Optional[int] = None
