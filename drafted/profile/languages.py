"""Spoken and programming language extraction for candidate filters.

Spoken languages are read from video transcripts: a language counts only when
a fluency word ("speak", "fluent", "native", ...) sits next to one of its
keyword spellings, in either order, with at most one word in between.
Programming languages come straight from the skills list.

None of these functions raise: malformed input yields empty results.
"""

import re
from collections.abc import Iterable
from typing import Any

# Canonical programming languages, in the order the stats cards count them.
PROGRAMMING_LANGUAGES: tuple[str, ...] = (
    "Python",
    "JavaScript",
    "Java",
    "C++",
    "C#",
    "TypeScript",
    "Swift",
    "Go",
    "PHP",
    "Dart",
    "Rust",
    "SQL",
)

CULTURE_TAGS: tuple[str, ...] = (
    "Integrity",
    "Innovation",
    "Teamwork",
    "Customer Obsession",
    "Accountability",
    "Transparency",
    "Fast Learning",
    "Resilience",
    "Respect",
    "Excellence",
    "Adaptability",
    "Leadership",
    "Creativity",
    "Communication",
    "Out of the Box Thinking",
)

# Language name → lowercase keyword variants, native spellings included.
LANGUAGE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "spanish": ("spanish", "español", "castellano"),
    "french": ("french", "français", "francais"),
    "mandarin": ("mandarin", "chinese", "中文"),
    "german": ("german", "deutsch"),
    "japanese": ("japanese", "日本語"),
    "korean": ("korean", "한국어"),
    "italian": ("italian", "italiano"),
    "portuguese": ("portuguese", "português", "portugues"),
    "russian": ("russian", "русский"),
    "arabic": ("arabic", "عربي"),
    "hindi": ("hindi", "हिन्दी"),
    "english": ("english",),
}

_FLUENCY_WORDS = (
    r"(?:speak\w*|fluent\w*|native\w*|bilingual|proficient\w*|conversational\w*"
    r"|intermediate|advanced|mother\s+tongue|tongue|languages?)"
)


def _keyword_pattern(keyword: str) -> str:
    escaped = re.escape(keyword)
    # \b is unreliable next to scripts written without spaces.
    if keyword.isascii():
        return rf"\b{escaped}\b"
    return escaped


def _compile_language_patterns() -> dict[str, re.Pattern[str]]:
    patterns: dict[str, re.Pattern[str]] = {}
    for language, keywords in LANGUAGE_KEYWORDS.items():
        alternatives: list[str] = []
        for keyword in keywords:
            kw = _keyword_pattern(keyword)
            alternatives.append(rf"\b{_FLUENCY_WORDS}\W+(?:\w+\W+)?{kw}")
            alternatives.append(rf"{kw}\W+(?:\w+\W+)?{_FLUENCY_WORDS}\b")
        patterns[language] = re.compile("|".join(alternatives))
    return patterns


_LANGUAGE_PATTERNS = _compile_language_patterns()


def extract_languages_from_transcript(transcripts: Any) -> list[str]:
    """Return the spoken languages a candidate claims in their transcripts.

    Args:
        transcripts: Sequence of transcript strings. Non-string entries are
            skipped; anything that is not a list or tuple yields no languages.

    Returns:
        Capitalized language names, each at most once, sorted.
    """
    if not isinstance(transcripts, (list, tuple)):
        return []
    text = " ".join(t for t in transcripts if isinstance(t, str)).lower()
    if not text.strip():
        return []
    found = {
        language.capitalize()
        for language, pattern in _LANGUAGE_PATTERNS.items()
        if pattern.search(text)
    }
    return sorted(found)


def extract_programming_languages(skills: Iterable[Any] | None) -> list[str]:
    """Return the skills that are canonical programming languages, in skill order."""
    if not isinstance(skills, (list, tuple)):
        return []
    result: list[str] = []
    for skill in skills:
        if skill in PROGRAMMING_LANGUAGES and skill not in result:
            result.append(skill)
    return result


def get_supported_languages() -> list[str]:
    """Spoken-language filter options, alphabetical."""
    return sorted(language.capitalize() for language in LANGUAGE_KEYWORDS)


def get_programming_languages() -> list[str]:
    return list(PROGRAMMING_LANGUAGES)


def get_culture_tags() -> list[str]:
    return sorted(CULTURE_TAGS)
