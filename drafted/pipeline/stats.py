"""Summary statistics and filter option lists over a candidate collection.

Stats are computed once per collection load, not per filter change.
"""

from collections import Counter
from collections.abc import Iterable

from drafted.core.schemas import (
    Candidate,
    CandidateStats,
    LanguageCount,
    MajorCount,
    TagCount,
    UniversityCount,
)
from drafted.profile.languages import PROGRAMMING_LANGUAGES

TOP_N = 5

_MISSING = "N/A"


def _present(value: str) -> bool:
    return bool(value) and value != _MISSING


def _ranked(values: Iterable[str]) -> list[tuple[str, int]]:
    """Count values, highest first; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for value in values:
        counts[value] += 1
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def get_candidate_stats(candidates: list[Candidate]) -> CandidateStats:
    """Compute the dashboard summary cards for ``candidates``."""
    if not candidates:
        return CandidateStats()

    universities = {c.university for c in candidates if _present(c.university)}
    majors = _ranked(c.major for c in candidates if _present(c.major))
    languages = _ranked(
        skill for c in candidates for skill in c.skills if skill in PROGRAMMING_LANGUAGES
    )
    tags = _ranked(tag for c in candidates for tag in c.culture_tags)
    total_videos = sum(c.video_count for c in candidates)

    return CandidateStats(
        total_with_video=sum(1 for c in candidates if c.video1),
        total_universities=len(universities),
        top_majors=[MajorCount(major=m, count=n) for m, n in majors[:TOP_N]],
        avg_videos_per_candidate=total_videos / len(candidates),
        top_programming_languages=[
            LanguageCount(language=lang, count=n) for lang, n in languages[:TOP_N]
        ],
        top_culture_tags=[TagCount(tag=t, count=n) for t, n in tags[:TOP_N]],
    )


def get_unique_values(candidates: list[Candidate], field: str) -> list[str]:
    """Return sorted distinct values of ``field``, skipping blanks and 'N/A'."""
    values = {getattr(c, field) for c in candidates}
    return sorted(v for v in values if isinstance(v, str) and _present(v))


def get_major_options(candidates: list[Candidate]) -> list[MajorCount]:
    """Majors with candidate counts, most common first."""
    ranked = _ranked(c.major for c in candidates if _present(c.major))
    return [MajorCount(major=m, count=n) for m, n in ranked]


def get_university_options(candidates: list[Candidate]) -> list[UniversityCount]:
    """Universities with candidate counts, most common first."""
    ranked = _ranked(c.university for c in candidates if _present(c.university))
    return [UniversityCount(university=u, count=n) for u, n in ranked]
