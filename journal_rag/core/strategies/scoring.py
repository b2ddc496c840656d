"""Scoring primitives for lexical and semantic retrieval."""
import re
from typing import Optional

import numpy as np

_WORD_RE = re.compile(r"\w+")
_ELLIPSIS = "..."


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity of two vectors. 0.0 on shape mismatch or zero norm."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape or a.size == 0:
        return 0.0

    norm_product = np.linalg.norm(a) * np.linalg.norm(b)
    if norm_product == 0:
        return 0.0
    return float(np.dot(a, b) / norm_product)


def lexical_score(body: str, title: Optional[str], query: str) -> float:
    """Relevance from whole-query occurrences when the store gives no score.

    Body matches weigh 1.0, title matches 2.0; the sum is normalized per
    100 characters of content and capped at 1.0.
    """
    query_lower = query.lower().strip()
    if not query_lower:
        return 0.0

    title_lower = (title or "").lower()
    score = body.lower().count(query_lower) * 1.0
    score += title_lower.count(query_lower) * 2.0

    content_length = len(body) + len(title_lower)
    if content_length > 0:
        score = score / max(content_length / 100.0, 1.0)

    return min(score, 1.0)


def keyword_similarity(body: str, title: Optional[str], query: str) -> float:
    """Keyword / co-occurrence similarity used when embeddings are unavailable.

    Per query term (3+ chars): +1.0 for a substring match, +0.5 per 4-char
    prefix match (up to 3), +0.3 per other query term directly adjacent.
    Result is term coverage times average term score, capped at 1.0.
    """
    query_words = _WORD_RE.findall(query.lower())
    if not query_words:
        return 0.0

    full_content = f"{(title or '').lower()} {body.lower()}"

    total_score = 0.0
    matched_words = 0

    for word in query_words:
        if len(word) < 3:
            continue

        word_score = 0.0
        if word in full_content:
            word_score += 1.0

        partial_matches = full_content.count(word[:4])
        if partial_matches > 0:
            word_score += 0.5 * min(partial_matches, 3)

        for other in query_words:
            if other == word:
                continue
            if f"{word} {other}" in full_content or f"{other} {word}" in full_content:
                word_score += 0.3

        if word_score > 0:
            matched_words += 1
            total_score += word_score

    if matched_words == 0:
        return 0.0

    coverage = matched_words / len(query_words)
    avg_score = total_score / matched_words
    return min(coverage * avg_score, 1.0)


def _find_match(content_lower: str, query: str) -> tuple[str, int]:
    """Locate the whole query, else the earliest query term (3+ chars)."""
    query_lower = query.lower().strip()
    if query_lower:
        pos = content_lower.find(query_lower)
        if pos >= 0:
            return query_lower, pos

    best: tuple[str, int] = ("", -1)
    for term in _WORD_RE.findall(query_lower):
        if len(term) < 3:
            continue
        pos = content_lower.find(term)
        if pos >= 0 and (best[1] < 0 or pos < best[1]):
            best = (term, pos)
    return best


def generate_snippet(content: str, query: str, max_length: int = 200) -> str:
    """Excerpt of ``content`` around the first query match.

    The result never exceeds ``max_length`` characters, ellipses included.
    Without a match the beginning of the content is returned.
    """
    if len(content) <= max_length:
        return content
    if max_length <= 2 * len(_ELLIPSIS):
        return content[:max_length]

    needle, pos = _find_match(content.lower(), query)
    if pos < 0:
        return content[: max_length - len(_ELLIPSIS)] + _ELLIPSIS

    budget = max_length - 2 * len(_ELLIPSIS)
    context = max(0, (budget - len(needle)) // 2)
    start = max(0, pos - context)
    end = min(len(content), start + budget)
    start = max(0, end - budget)

    snippet = content[start:end]
    if start > 0:
        snippet = _ELLIPSIS + snippet
    if end < len(content):
        snippet = snippet + _ELLIPSIS
    return snippet
