"""Entry store protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.entry import Entry


class EntryStoreError(Exception):
    """Entry store is unreachable or returned malformed data."""


@runtime_checkable
class EntryStoreProtocol(Protocol):
    """Protocol for read access to journal entries."""

    def search(self, query: str, limit: int = 10) -> list[Entry]:
        """Full-text search.

        Args:
            query: Free-text query.
            limit: Max entries to return.

        Returns:
            Entries ranked by lexical relevance, with ``snippet`` set and
            ``relevance_score`` set when the store computes one.

        Raises:
            EntryStoreError: Store failure.
        """
        ...

    def list(self, limit: int = 100, cursor: Optional[str] = None) -> list[Entry]:
        """Unfiltered scan, newest first.

        Args:
            limit: Max entries to return.
            cursor: Opaque continuation token (id of the last entry seen).

        Raises:
            EntryStoreError: Store failure.
        """
        ...
