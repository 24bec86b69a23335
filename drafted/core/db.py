"""SQLite storage layer for candidate documents."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

_CANDIDATES_TABLE = """
CREATE TABLE IF NOT EXISTS candidates (
    id          TEXT    PRIMARY KEY,
    email       TEXT    NOT NULL DEFAULT '',
    created_at  TEXT    NOT NULL,
    has_video1  INTEGER NOT NULL DEFAULT 0,
    document    TEXT    NOT NULL
);
"""

_CREATED_AT_INDEX = """
CREATE INDEX IF NOT EXISTS idx_candidates_created_at ON candidates (created_at);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_CANDIDATES_TABLE)
    conn.execute(_CREATED_AT_INDEX)
    conn.commit()
    return conn


def upsert_document(conn: sqlite3.Connection, document: dict[str, Any]) -> bool:
    """Insert or replace a raw candidate document keyed by its id.

    A document without ``id`` is keyed by its email, and one without
    ``email`` takes its id as email. Returns True if a new row was inserted,
    False if an existing row was replaced.

    Raises:
        ValueError: If the document has neither id nor email.
    """
    doc_id = document.get("id") or document.get("email")
    if not doc_id:
        msg = "candidate document needs an 'id' or 'email'"
        raise ValueError(msg)
    doc = {**document, "id": str(doc_id)}
    if not doc.get("email"):
        doc["email"] = doc["id"]
    created_at = doc.get("createdAt") or datetime.now().isoformat()
    doc["createdAt"] = created_at

    existed = conn.execute(
        "SELECT 1 FROM candidates WHERE id = ? LIMIT 1", (doc["id"],)
    ).fetchone() is not None
    conn.execute(
        """
        INSERT INTO candidates (id, email, created_at, has_video1, document)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            email = excluded.email,
            created_at = excluded.created_at,
            has_video1 = excluded.has_video1,
            document = excluded.document
        """,
        (
            doc["id"],
            doc.get("email") or "",
            created_at,
            int(bool(doc.get("video1"))),
            json.dumps(doc),
        ),
    )
    conn.commit()
    return not existed


def fetch_documents(
    conn: sqlite3.Connection,
    limit: int,
    has_video1: bool = False,
) -> list[dict[str, Any]]:
    """Return raw candidate documents, newest first, capped at ``limit``."""
    rows = conn.execute(
        """
        SELECT document FROM candidates
        WHERE has_video1 = 1 OR ? = 0
        ORDER BY created_at DESC
        LIMIT ?
        """,
        (int(has_video1), limit),
    ).fetchall()
    return [json.loads(row["document"]) for row in rows]


def count_with_video1(conn: sqlite3.Connection) -> int:
    """Count stored candidates that have recorded their first video."""
    row = conn.execute("SELECT COUNT(*) AS n FROM candidates WHERE has_video1 = 1").fetchone()
    return int(row["n"])
