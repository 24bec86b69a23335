"""SQLite-backed candidate source with a short-lived in-memory cache."""

import logging
import sqlite3
import time
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import ValidationError

from drafted.adapters.base import CandidateSource, CandidateSourceError, SourceFilters
from drafted.core.config import SourceConfig
from drafted.core.db import count_with_video1, fetch_documents, upsert_document
from drafted.core.schemas import Candidate

logger = logging.getLogger(__name__)


class SqliteCandidateSource(CandidateSource):
    """Reads candidate documents from SQLite, newest first.

    Results are cached per (video1 hint, limit) for ``cache_ttl_seconds``;
    ``force_refresh`` bypasses and refills the cache.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        config: SourceConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._conn = conn
        self._config = config or SourceConfig()
        self._clock = clock
        self._cache: dict[tuple[bool, int], tuple[float, list[Candidate]]] = {}

    async def fetch_candidates(
        self,
        filters: SourceFilters | None = None,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> list[Candidate]:
        filters = filters or SourceFilters()
        limit = limit or self._config.fetch_limit
        key = (filters.has_video1, limit)

        cached = self._cache.get(key)
        if not force_refresh and cached is not None:
            stored_at, candidates = cached
            if self._clock() - stored_at < self._config.cache_ttl_seconds:
                logger.debug("Using cached candidates (%d)", len(candidates))
                return list(candidates)

        try:
            documents = fetch_documents(self._conn, limit, has_video1=filters.has_video1)
        except sqlite3.Error as e:
            msg = f"failed to read candidates: {e}"
            raise CandidateSourceError(msg) from e

        candidates = list(_parse_documents(documents))
        self._cache[key] = (self._clock(), candidates)
        logger.info("Fetched %d candidates", len(candidates))
        return list(candidates)

    def clear_cache(self) -> None:
        self._cache.clear()

    def import_candidates(self, documents: Iterable[dict[str, Any]]) -> tuple[int, int]:
        """Upsert raw candidate documents. Returns (inserted, updated)."""
        inserted = updated = 0
        for doc in documents:
            if upsert_document(self._conn, doc):
                inserted += 1
            else:
                updated += 1
        self.clear_cache()
        logger.info("Imported candidates: %d new, %d updated", inserted, updated)
        return inserted, updated

    def count_with_video(self) -> int:
        return count_with_video1(self._conn)


def _parse_documents(documents: Iterable[dict[str, Any]]) -> Iterable[Candidate]:
    for doc in documents:
        try:
            yield Candidate.model_validate(doc)
        except ValidationError as e:
            logger.warning("Skipping malformed candidate %r: %s", doc.get("id"), e)
