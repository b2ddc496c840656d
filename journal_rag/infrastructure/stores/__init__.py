"""Entry store implementations."""
from .sqlite_store import SQLiteEntryStore

__all__ = ["SQLiteEntryStore"]
