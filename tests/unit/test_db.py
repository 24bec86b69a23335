"""Tests for the database layer: init, upsert, ordering, video1 hint."""

import sqlite3
from pathlib import Path

import pytest

from drafted.core.db import count_with_video1, fetch_documents, init_db, upsert_document


@pytest.fixture()
def db(tmp_path: Path) -> sqlite3.Connection:
    return init_db(tmp_path / "test.db")


class TestInitDb:
    def test_creates_tables(self, db: sqlite3.Connection) -> None:
        tables = {
            row[0]
            for row in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        assert "candidates" in tables

    def test_idempotent(self, tmp_path: Path) -> None:
        p = tmp_path / "double.db"
        init_db(p).close()
        conn = init_db(p)
        assert conn is not None
        conn.close()

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        p = tmp_path / "sub" / "dir" / "test.db"
        init_db(p).close()
        assert p.exists()


class TestUpsertDocument:
    def test_insert_new(self, db: sqlite3.Connection) -> None:
        assert upsert_document(db, {"id": "a@x.com", "firstName": "Ada"}) is True

    def test_replace_existing(self, db: sqlite3.Connection) -> None:
        upsert_document(db, {"id": "a@x.com", "firstName": "Ada"})
        assert upsert_document(db, {"id": "a@x.com", "firstName": "Ada B."}) is False
        docs = fetch_documents(db, limit=10)
        assert len(docs) == 1
        assert docs[0]["firstName"] == "Ada B."

    def test_email_used_as_id(self, db: sqlite3.Connection) -> None:
        upsert_document(db, {"email": "g@x.com"})
        assert fetch_documents(db, limit=10)[0]["id"] == "g@x.com"

    def test_id_used_as_email(self, db: sqlite3.Connection) -> None:
        upsert_document(db, {"id": "g@x.com"})
        assert fetch_documents(db, limit=10)[0]["email"] == "g@x.com"

    def test_blank_email_filled_from_id(self, db: sqlite3.Connection) -> None:
        upsert_document(db, {"id": "a", "email": ""})
        upsert_document(db, {"id": "b", "email": None})
        emails = {d["id"]: d["email"] for d in fetch_documents(db, limit=10)}
        assert emails == {"a": "a", "b": "b"}

    def test_requires_identity(self, db: sqlite3.Connection) -> None:
        with pytest.raises(ValueError):
            upsert_document(db, {"firstName": "Nobody"})

    def test_created_at_defaulted(self, db: sqlite3.Connection) -> None:
        upsert_document(db, {"id": "a"})
        assert fetch_documents(db, limit=1)[0]["createdAt"]


class TestFetchDocuments:
    def test_newest_first_with_limit(self, db: sqlite3.Connection) -> None:
        upsert_document(db, {"id": "old", "createdAt": "2024-01-01T00:00:00"})
        upsert_document(db, {"id": "new", "createdAt": "2025-06-01T00:00:00"})
        upsert_document(db, {"id": "mid", "createdAt": "2025-01-01T00:00:00"})
        assert [d["id"] for d in fetch_documents(db, limit=10)] == ["new", "mid", "old"]
        assert [d["id"] for d in fetch_documents(db, limit=2)] == ["new", "mid"]

    def test_has_video1_hint(self, db: sqlite3.Connection) -> None:
        upsert_document(db, {"id": "a", "video1": "https://v/1"})
        upsert_document(db, {"id": "b", "video1": ""})
        upsert_document(db, {"id": "c"})
        assert [d["id"] for d in fetch_documents(db, limit=10, has_video1=True)] == ["a"]
        assert count_with_video1(db) == 1
