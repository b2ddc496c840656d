"""Citation extraction and answer confidence."""

import logging
import re

from ..models.rag import Citation, ContextEntry

logger = logging.getLogger(__name__)

CITATION_RE = re.compile(r"\[Entry (\d+)\]")
MAX_CITATION_SNIPPET = 200
FALLBACK_CITATIONS = 3
FALLBACK_MIN_RELEVANCE = 0.3
MAX_CONFIDENCE = 0.95


def truncate_snippet(snippet: str, max_length: int = MAX_CITATION_SNIPPET) -> str:
    if len(snippet) > max_length:
        return snippet[:max_length] + "..."
    return snippet


def make_citation(entry: ContextEntry, number: int) -> Citation:
    return Citation(
        entry_id=entry.entry_id,
        entry_title=entry.title,
        entry_date=entry.date,
        snippet=truncate_snippet(entry.snippet),
        relevance_score=entry.relevance_score,
        citation_number=number,
    )


def top_citations(context: list[ContextEntry]) -> list[Citation]:
    """Cite the leading context entries that are relevant enough."""
    return [
        make_citation(entry, i)
        for i, entry in enumerate(context[:FALLBACK_CITATIONS], 1)
        if entry.relevance_score > FALLBACK_MIN_RELEVANCE
    ]


def extract_citations(answer: str, context: list[ContextEntry]) -> list[Citation]:
    """Resolve ``[Entry N]`` markers to context entries.

    Out-of-range markers are ignored and each entry is cited once, in order
    of first appearance. Without any resolvable marker the top relevant
    entries are cited instead.
    """
    citations = []
    seen: set[int] = set()

    for match in CITATION_RE.finditer(answer):
        number = int(match.group(1))
        if number < 1 or number > len(context) or number in seen:
            continue
        seen.add(number)
        citations.append(make_citation(context[number - 1], number))

    if not citations:
        citations = top_citations(context)
        logger.debug(f"No citation markers resolved, using top {len(citations)} entries")

    return citations


def calculate_confidence(answer: str, context: list[ContextEntry]) -> float:
    """Confidence from context size, mean relevance and answer length."""
    if not context:
        return 0.0

    context_factor = min(1.0, len(context) / 5.0)
    relevance_factor = sum(e.relevance_score for e in context) / len(context)
    length_factor = min(1.0, len(answer) / 200.0)

    confidence = (context_factor + relevance_factor + length_factor) / 3.0
    return max(0.0, min(MAX_CONFIDENCE, confidence))
