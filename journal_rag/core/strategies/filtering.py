import logging
from datetime import datetime, timezone
from typing import Optional

from ..models.search import SearchFilters, SearchResult

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def apply_filters(
    results: list[SearchResult],
    filters: Optional[SearchFilters],
    limit: Optional[int] = None,
) -> list[SearchResult]:
    """Apply date range, tags, source types and min score, then cap.

    All constraints are optional and conjunctive; order is preserved.
    Naive date bounds are read as UTC.
    """
    filtered = list(results)

    if filters is not None:
        if filters.date_range is not None:
            start, end = (as_utc(d) for d in filters.date_range)
            filtered = [r for r in filtered if start <= as_utc(r.date) <= end]

        if filters.tags:
            required = set(filters.tags)
            filtered = [r for r in filtered if required.intersection(r.tags)]

        if filters.source_types:
            filtered = [r for r in filtered if r.source_type in filters.source_types]

        if filters.min_score is not None:
            filtered = [r for r in filtered if r.score >= filters.min_score]

    if limit is not None:
        filtered = filtered[:limit]

    if len(filtered) < len(results):
        logger.debug(f"Filters: {len(results)} → {len(filtered)}")

    return filtered
