"""Scoring, fusion and filtering strategies."""
from .filtering import apply_filters, as_utc
from .fusion import reciprocal_rank_fusion
from .scoring import cosine_similarity, generate_snippet, keyword_similarity, lexical_score

__all__ = [
    "apply_filters",
    "as_utc",
    "reciprocal_rank_fusion",
    "cosine_similarity",
    "generate_snippet",
    "keyword_similarity",
    "lexical_score",
]
