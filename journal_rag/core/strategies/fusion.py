
import logging
from dataclasses import replace

from ..models.search import Provenance, RankedEntry, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_RRF_K = 60.0


def _contribution(rank: int, k: float) -> float:
    return 1.0 / (k + rank + 1.0)


def _unique(results: list[SearchResult]) -> list[SearchResult]:
    seen: set[str] = set()
    unique = []
    for result in results:
        if result.id in seen:
            continue
        seen.add(result.id)
        unique.append(result)
    return unique


def reciprocal_rank_fusion(
    lexical_results: list[SearchResult],
    vector_results: list[SearchResult],
    k: float = DEFAULT_RRF_K,
) -> list[SearchResult]:
    """Merge two rankings with Reciprocal Rank Fusion.

    An entry at 0-based rank ``r`` contributes ``1 / (k + r + 1)``; entries
    found by both searches sum their contributions and become ``hybrid``.
    The exposed score is rescaled by ``(k + 1) / 2`` so that it lies in
    [0, 1] (1.0 = first in both lists) and stays comparable with ``min_score``.
    Ties keep lexical-then-vector insertion order.

    Args:
        lexical_results: Full-text ranking.
        vector_results: Semantic ranking.
        k: RRF damping constant.

    Returns:
        Fused results sorted by descending score.
    """
    ranked: dict[str, RankedEntry] = {}

    for rank, result in enumerate(_unique(lexical_results)):
        ranked[result.id] = RankedEntry(
            result=replace(result, tags=list(result.tags)),
            fused_score=_contribution(rank, k),
            lexical_rank=rank,
        )

    for rank, result in enumerate(_unique(vector_results)):
        contribution = _contribution(rank, k)
        existing = ranked.get(result.id)
        if existing is not None:
            existing.fused_score += contribution
            existing.vector_rank = rank
            existing.result.provenance = Provenance.HYBRID
        else:
            ranked[result.id] = RankedEntry(
                result=replace(result, tags=list(result.tags)),
                fused_score=contribution,
                vector_rank=rank,
            )

    ordered = sorted(ranked.values(), key=lambda r: r.fused_score, reverse=True)
    scale = (k + 1.0) / 2.0

    hybrid_count = sum(1 for r in ordered if r.result.provenance == Provenance.HYBRID)
    logger.debug(
        f"RRF: {len(lexical_results)} lexical + {len(vector_results)} vector "
        f"-> {len(ordered)} fused ({hybrid_count} hybrid)"
    )

    return [
        replace(r.result, score=min(1.0, r.fused_score * scale)) for r in ordered
    ]
