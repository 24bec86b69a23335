"""Core data models for the candidate dashboard."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _str_entries(v: Any) -> Any:
    """Keep the string entries of a list; anything else degrades to empty."""
    if isinstance(v, (list, tuple)):
        return tuple(item for item in v if isinstance(item, str))
    return ()


class CultureProfile(BaseModel):
    """Culture tags generated from a candidate's video transcripts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    culture_tags: tuple[str, ...] = Field(default=(), alias="cultureTags")
    culture_descriptions: tuple[str, ...] = Field(default=(), alias="cultureDescriptions")

    @field_validator("culture_tags", "culture_descriptions", mode="before")
    @classmethod
    def lenient_entries(cls, v: Any) -> Any:
        return _str_entries(v)


class Candidate(BaseModel):
    """One recruiting profile as stored in the candidate collection.

    Frozen: the dashboard treats a loaded collection as an immutable snapshot.
    Field aliases follow the camelCase document shape (``firstName``,
    ``linkedInURL``, ...), snake_case names are accepted as well.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    email: str = ""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    university: str = ""
    major: str = ""
    graduation_year: int | str | None = Field(default=None, alias="graduationYear")
    skills: tuple[str, ...] = ()
    culture: CultureProfile | None = None
    linkedin_url: str = Field(default="", alias="linkedInURL")
    github_url: str = Field(default="", alias="gitHubURL")
    resume: str = ""
    video1: str | None = None
    video2: str | None = None
    video3: str | None = None
    transcripts: tuple[str, ...] = ()
    created_at: str | None = Field(default=None, alias="createdAt")

    # Malformed field values degrade to empty rather than rejecting the profile.

    @field_validator(
        "email", "first_name", "last_name", "university", "major",
        "linkedin_url", "github_url", "resume",
        mode="before",
    )
    @classmethod
    def non_str_to_blank(cls, v: Any) -> Any:
        return v if isinstance(v, str) else ""

    @field_validator("video1", "video2", "video3", "created_at", mode="before")
    @classmethod
    def non_str_to_none(cls, v: Any) -> Any:
        return v if isinstance(v, str) else None

    @field_validator("graduation_year", mode="before")
    @classmethod
    def lenient_year(cls, v: Any) -> Any:
        if isinstance(v, float) and v.is_integer():
            return int(v)
        if isinstance(v, bool) or not isinstance(v, (int, str)):
            return None
        return v

    @field_validator("skills", "transcripts", mode="before")
    @classmethod
    def lenient_entries(cls, v: Any) -> Any:
        return _str_entries(v)

    @field_validator("culture", mode="before")
    @classmethod
    def non_object_culture_to_none(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, CultureProfile)) else None

    @property
    def culture_tags(self) -> tuple[str, ...]:
        return self.culture.culture_tags if self.culture is not None else ()

    @property
    def videos(self) -> tuple[str | None, str | None, str | None]:
        return (self.video1, self.video2, self.video3)

    @property
    def video_count(self) -> int:
        """Number of recorded videos, judged by truthiness."""
        return sum(1 for v in self.videos if v)

    @property
    def graduation_year_text(self) -> str:
        return "" if self.graduation_year is None else str(self.graduation_year)


class VideoFilter(str, Enum):
    """Video completion filter. Exactly one value is active at a time."""

    ANY = "any"
    HAS_1 = "has1"
    HAS_2_PLUS = "has2+"
    HAS_3 = "has3"


# Multi-select dimensions of FilterCriteria, in predicate order.
SELECTION_FIELDS: tuple[str, ...] = (
    "programming_langs",
    "spoken_langs",
    "universities",
    "majors",
    "grad_years",
    "culture_tags",
)


class FilterCriteria(BaseModel):
    """The complete set of filter values selected on the dashboard.

    Frozen and hashable so it can key the filtered-view memo.
    """

    model_config = ConfigDict(frozen=True)

    search_query: str = ""
    programming_langs: frozenset[str] = frozenset()
    spoken_langs: frozenset[str] = frozenset()
    universities: frozenset[str] = frozenset()
    majors: frozenset[str] = frozenset()
    grad_years: frozenset[str] = frozenset()
    culture_tags: frozenset[str] = frozenset()
    video_filter: VideoFilter = VideoFilter.ANY

    @property
    def normalized_query(self) -> str:
        return self.search_query.strip().lower()

    @property
    def has_active_filters(self) -> bool:
        return (
            bool(self.normalized_query)
            or any(getattr(self, name) for name in SELECTION_FIELDS)
            or self.video_filter is not VideoFilter.ANY
        )


class MajorCount(BaseModel):
    major: str
    count: int


class UniversityCount(BaseModel):
    university: str
    count: int


class LanguageCount(BaseModel):
    language: str
    count: int


class TagCount(BaseModel):
    tag: str
    count: int


class CandidateStats(BaseModel):
    """Summary metrics shown on the dashboard cards."""

    total_with_video: int = 0
    total_universities: int = 0
    top_majors: list[MajorCount] = Field(default_factory=list)
    avg_videos_per_candidate: float = 0.0
    top_programming_languages: list[LanguageCount] = Field(default_factory=list)
    top_culture_tags: list[TagCount] = Field(default_factory=list)
