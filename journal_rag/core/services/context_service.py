"""Context assembly - numbered, citable context for answer generation."""

from ..models.rag import ContextEntry
from ..models.search import SearchResult

SNIPPET_WORDS = 50


class ContextBuilder:
    """Turns ranked results into ordered context entries.

    Position ``i`` in the returned list is cited as ``[Entry i+1]``.
    """

    def __init__(self, snippet_words: int = SNIPPET_WORDS):
        self._snippet_words = snippet_words

    def build(self, results: list[SearchResult]) -> list[ContextEntry]:
        return [
            ContextEntry(
                entry_id=r.id,
                title=r.title,
                body=r.body,
                date=r.date,
                tags=list(r.tags),
                relevance_score=r.score,
                snippet=r.snippet or " ".join(r.body.split()[: self._snippet_words]),
            )
            for r in results
        ]

    @staticmethod
    def render(context: list[ContextEntry]) -> str:
        """Format context as prompt text, one block per entry."""
        parts = []
        for i, entry in enumerate(context, 1):
            parts.append(
                f"[Entry {i}] Date: {entry.date.strftime('%Y-%m-%d')} | "
                f"Tags: {', '.join(entry.tags)} | Content: {entry.snippet}"
            )
        return "\n\n".join(parts)
