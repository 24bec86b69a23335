"""Predicate chain for the candidate dashboard.

Filter order:
  1. SearchQueryFilter         — case-insensitive substring over name/email/major/university
  2. ProgrammingLanguageFilter — skills ∩ selected languages
  3. SpokenLanguageFilter      — transcript languages ∩ selected languages (lazy)
  4. FieldMembershipFilter     — university
  5. FieldMembershipFilter     — major
  6. GraduationYearFilter      — stringified year in selection
  7. CultureTagFilter          — culture tags ∩ selection
  8. VideoCompletionFilter     — any / has1 / has2+ / has3

Every filter keeps the input order and is a no-op when its criterion is empty.
"""

import logging
from collections.abc import Callable, Iterable

from drafted.core.schemas import Candidate, FilterCriteria, VideoFilter
from drafted.profile.languages import (
    extract_languages_from_transcript,
    extract_programming_languages,
)

logger = logging.getLogger(__name__)

# A filter is a callable that takes candidates and returns a subset.
Filter = Callable[[list[Candidate]], list[Candidate]]


class SpokenLanguageIndex:
    """Memo of transcript-derived spoken languages, keyed by candidate id.

    Belongs to one collection snapshot; call ``reset`` when the collection is
    replaced. Languages are only extracted for candidates that are asked for.
    """

    def __init__(self) -> None:
        self._languages: dict[str, frozenset[str]] = {}

    def __len__(self) -> int:
        return len(self._languages)

    def languages_for(self, candidate: Candidate) -> frozenset[str]:
        cached = self._languages.get(candidate.id)
        if cached is None:
            cached = frozenset(extract_languages_from_transcript(list(candidate.transcripts)))
            self._languages[candidate.id] = cached
        return cached

    def reset(self) -> None:
        self._languages.clear()


def _log_removed(name: str, before: int, after: int) -> None:
    removed = before - after
    if removed:
        logger.debug("%s: removed %d candidates", name, removed)


class SearchQueryFilter:
    """Keep candidates whose first/last name, email, major or university contains the query."""

    def __init__(self, query: str) -> None:
        self._query = query.strip().lower()

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self._query:
            return candidates
        result = [c for c in candidates if self._matches(c)]
        _log_removed("SearchQueryFilter", len(candidates), len(result))
        return result

    def _matches(self, candidate: Candidate) -> bool:
        fields = (
            candidate.first_name,
            candidate.last_name,
            candidate.email,
            candidate.major,
            candidate.university,
        )
        return any(self._query in field.lower() for field in fields)


class ProgrammingLanguageFilter:
    """Keep candidates listing at least one selected programming language."""

    def __init__(self, languages: Iterable[str]) -> None:
        self._languages = frozenset(languages)

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self._languages:
            return candidates
        result = [
            c for c in candidates
            if self._languages.intersection(extract_programming_languages(list(c.skills)))
        ]
        _log_removed("ProgrammingLanguageFilter", len(candidates), len(result))
        return result


class SpokenLanguageFilter:
    """Keep candidates whose transcripts mention a selected spoken language.

    Transcript scanning goes through ``index`` so unchanged candidates are
    only scanned once per collection snapshot.
    """

    def __init__(self, languages: Iterable[str], index: SpokenLanguageIndex | None = None) -> None:
        self._languages = frozenset(languages)
        self._index = index if index is not None else SpokenLanguageIndex()

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self._languages:
            return candidates
        result = [
            c for c in candidates
            if self._languages.intersection(self._index.languages_for(c))
        ]
        _log_removed("SpokenLanguageFilter", len(candidates), len(result))
        return result


class FieldMembershipFilter:
    """Keep candidates whose ``field`` value is exactly one of ``values``."""

    def __init__(self, field: str, values: Iterable[str]) -> None:
        self._field = field
        self._values = frozenset(values)

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self._values:
            return candidates
        result = [c for c in candidates if getattr(c, self._field) in self._values]
        _log_removed(f"FieldMembershipFilter[{self._field}]", len(candidates), len(result))
        return result


class GraduationYearFilter:
    """Keep candidates whose graduation year, as text, is selected.

    Stored years may be ints or strings; both compare by their string form.
    """

    def __init__(self, years: Iterable[str]) -> None:
        self._years = frozenset(str(y) for y in years)

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self._years:
            return candidates
        result = [c for c in candidates if c.graduation_year_text in self._years]
        _log_removed("GraduationYearFilter", len(candidates), len(result))
        return result


class CultureTagFilter:
    """Keep candidates carrying at least one selected culture tag."""

    def __init__(self, tags: Iterable[str]) -> None:
        self._tags = frozenset(tags)

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self._tags:
            return candidates
        result = [c for c in candidates if self._tags.intersection(c.culture_tags)]
        _log_removed("CultureTagFilter", len(candidates), len(result))
        return result


class VideoCompletionFilter:
    """Filter on recorded videos.

    ``has2+`` requires video1 and video2 specifically; a candidate with only
    video1 and video3 does not pass.
    """

    def __init__(self, video_filter: VideoFilter) -> None:
        self._video_filter = VideoFilter(video_filter)

    def __call__(self, candidates: list[Candidate]) -> list[Candidate]:
        if self._video_filter is VideoFilter.ANY:
            return candidates
        result = [c for c in candidates if self._matches(c)]
        _log_removed("VideoCompletionFilter", len(candidates), len(result))
        return result

    def _matches(self, candidate: Candidate) -> bool:
        if self._video_filter is VideoFilter.HAS_1:
            return bool(candidate.video1)
        if self._video_filter is VideoFilter.HAS_2_PLUS:
            return bool(candidate.video1 and candidate.video2)
        return bool(candidate.video1 and candidate.video2 and candidate.video3)


def build_filters(
    criteria: FilterCriteria,
    spoken_index: SpokenLanguageIndex | None = None,
) -> list[Filter]:
    """Build the predicate chain for ``criteria`` in the fixed order."""
    filters: list[Filter] = [
        SearchQueryFilter(criteria.search_query),
        ProgrammingLanguageFilter(criteria.programming_langs),
        SpokenLanguageFilter(criteria.spoken_langs, spoken_index),
        FieldMembershipFilter("university", criteria.universities),
        FieldMembershipFilter("major", criteria.majors),
        GraduationYearFilter(criteria.grad_years),
        CultureTagFilter(criteria.culture_tags),
        VideoCompletionFilter(criteria.video_filter),
    ]
    return filters


def run_filter_chain(
    candidates: list[Candidate],
    filters: list[Filter],
) -> list[Candidate]:
    """Apply filters in order, returning the surviving candidates."""
    result = candidates
    for f in filters:
        result = f(result)
    return result


def filter_candidates(
    candidates: list[Candidate],
    criteria: FilterCriteria,
    spoken_index: SpokenLanguageIndex | None = None,
) -> list[Candidate]:
    """Return the candidates matching every criterion, in collection order."""
    return run_filter_chain(list(candidates), build_filters(criteria, spoken_index))
