import logging
import re
import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path
from typing import Optional

from journal_rag.core.models.entry import Entry
from journal_rag.core.protocols.entry_store import EntryStoreError
from journal_rag.core.strategies.filtering import as_utc

logger = logging.getLogger(__name__)

_TERM_RE = re.compile(r"\w+")

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS entries (
        id TEXT PRIMARY KEY,
        title TEXT,
        body TEXT NOT NULL,
        entry_date TEXT NOT NULL,
        source_path TEXT NOT NULL,
        source_type TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_entries_entry_date ON entries(entry_date);

    CREATE TABLE IF NOT EXISTS entry_tags (
        entry_id TEXT NOT NULL REFERENCES entries(id) ON DELETE CASCADE,
        tag TEXT NOT NULL,
        PRIMARY KEY (entry_id, tag)
    );

    CREATE VIRTUAL TABLE IF NOT EXISTS entries_fts USING fts5(
        title,
        body,
        entry_id UNINDEXED
    );
"""

_ENTRY_COLUMNS = "e.id, e.title, e.body, e.entry_date, e.source_path, e.source_type"


def _to_match_expression(query: str) -> str:
    """Turn free text into an FTS5 expression: quoted terms joined by OR."""
    terms = _TERM_RE.findall(query.lower())
    return " OR ".join(f'"{t}"' for t in terms)


def _parse_date(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value))


class SQLiteEntryStore:
    """Journal entry store on SQLite with an FTS5 index."""

    def __init__(self, database_path: str = "./journal.db"):
        """Initialize store.

        Args:
            database_path: SQLite file path.
        """
        self._database_path = Path(database_path)
        self._initialized = False

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self._database_path))
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise EntryStoreError(f"Cannot open {self._database_path}: {e}") from e
        return conn

    def initialize(self) -> None:
        """Create schema if missing."""
        if self._initialized:
            return
        self._database_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with closing(self._connect()) as conn:
                conn.executescript(_SCHEMA)
                conn.commit()
        except sqlite3.Error as e:
            raise EntryStoreError(f"Schema creation failed: {e}") from e
        self._initialized = True
        logger.info(f"Entry store ready: {self._database_path}")

    def add_entry(self, entry: Entry) -> None:
        """Insert or replace an entry with its tags and FTS row.

        Dates are stored as UTC ISO strings so text order is time order.
        """
        self.initialize()
        try:
            with closing(self._connect()) as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO entries "
                    "(id, title, body, entry_date, source_path, source_type) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        entry.id,
                        entry.title,
                        entry.body,
                        as_utc(entry.date).isoformat(),
                        entry.source_path,
                        entry.source_type,
                    ),
                )
                conn.execute("DELETE FROM entry_tags WHERE entry_id = ?", (entry.id,))
                conn.executemany(
                    "INSERT OR IGNORE INTO entry_tags (entry_id, tag) VALUES (?, ?)",
                    [(entry.id, tag) for tag in entry.tags],
                )
                conn.execute("DELETE FROM entries_fts WHERE entry_id = ?", (entry.id,))
                conn.execute(
                    "INSERT INTO entries_fts (title, body, entry_id) VALUES (?, ?, ?)",
                    (entry.title or "", entry.body, entry.id),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise EntryStoreError(f"Failed to save entry {entry.id}: {e}") from e

    def _load_tags(self, conn: sqlite3.Connection, entry_ids: list[str]) -> dict[str, list[str]]:
        if not entry_ids:
            return {}
        placeholders = ",".join("?" for _ in entry_ids)
        rows = conn.execute(
            f"SELECT entry_id, tag FROM entry_tags WHERE entry_id IN ({placeholders}) "
            "ORDER BY tag",
            entry_ids,
        ).fetchall()
        tags: dict[str, list[str]] = {}
        for row in rows:
            tags.setdefault(row["entry_id"], []).append(row["tag"])
        return tags

    def _row_to_entry(self, row: sqlite3.Row, tags: list[str], snippet: str = "") -> Entry:
        return Entry(
            id=row["id"],
            title=row["title"],
            body=row["body"],
            date=_parse_date(row["entry_date"]),
            source_path=row["source_path"],
            source_type=row["source_type"],
            tags=tags,
            snippet=snippet,
        )

    def search(self, query: str, limit: int = 10) -> list[Entry]:
        """Full-text search ordered by bm25.

        No store score is attached; callers compute their own relevance.
        """
        expression = _to_match_expression(query)
        if not expression:
            return []

        self.initialize()
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(
                    f"SELECT {_ENTRY_COLUMNS}, "
                    "snippet(entries_fts, 1, '', '', '...', 10) AS snip "
                    "FROM entries_fts f JOIN entries e ON e.id = f.entry_id "
                    "WHERE entries_fts MATCH ? "
                    "ORDER BY bm25(entries_fts) ASC LIMIT ?",
                    (expression, limit),
                ).fetchall()
                tags = self._load_tags(conn, [r["id"] for r in rows])
                entries = [
                    self._row_to_entry(r, tags.get(r["id"], []), r["snip"] or "")
                    for r in rows
                ]
        except (sqlite3.Error, ValueError) as e:
            raise EntryStoreError(f"Full-text search failed: {e}") from e

        logger.debug(f"FTS: {len(entries)} entries for '{query[:50]}'")
        return entries

    def list(self, limit: int = 100, cursor: Optional[str] = None) -> list[Entry]:
        """Entries newest first, continuing after ``cursor`` when given."""
        self.initialize()
        sql = f"SELECT {_ENTRY_COLUMNS} FROM entries e"
        params: list = []
        if cursor:
            sql += (
                " WHERE (e.entry_date, e.id) < "
                "(SELECT entry_date, id FROM entries WHERE id = ?)"
            )
            params.append(cursor)
        sql += " ORDER BY e.entry_date DESC, e.id DESC LIMIT ?"
        params.append(limit)

        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(sql, params).fetchall()
                tags = self._load_tags(conn, [r["id"] for r in rows])
                return [self._row_to_entry(r, tags.get(r["id"], [])) for r in rows]
        except (sqlite3.Error, ValueError) as e:
            raise EntryStoreError(f"Listing entries failed: {e}") from e

    def get_entry(self, entry_id: str) -> Optional[Entry]:
        self.initialize()
        try:
            with closing(self._connect()) as conn:
                row = conn.execute(
                    f"SELECT {_ENTRY_COLUMNS} FROM entries e WHERE e.id = ?", (entry_id,)
                ).fetchone()
                if row is None:
                    return None
                tags = self._load_tags(conn, [entry_id])
                return self._row_to_entry(row, tags.get(entry_id, []))
        except (sqlite3.Error, ValueError) as e:
            raise EntryStoreError(f"Loading entry {entry_id} failed: {e}") from e

    def count(self) -> int:
        """Get entry count."""
        self.initialize()
        try:
            with closing(self._connect()) as conn:
                return conn.execute("SELECT COUNT(*) FROM entries").fetchone()[0]
        except sqlite3.Error as e:
            raise EntryStoreError(f"Count failed: {e}") from e
