"""CSV serialisation of candidate lists.

Values containing a comma, double quote or newline are wrapped in double
quotes with inner quotes doubled; everything else is written raw. Rows are
joined with ``\\n`` and the header row always comes first.
"""

from datetime import date, datetime, timezone

from drafted.core.schemas import Candidate

CSV_HEADERS: tuple[str, ...] = (
    "First Name",
    "Last Name",
    "Email",
    "University",
    "Major",
    "Graduation Year",
    "Videos Completed",
    "Has Video 1",
    "Has Video 2",
    "Has Video 3",
    "Skills",
    "Culture Tags",
    "LinkedIn URL",
    "GitHub URL",
    "Resume URL",
)

_NEEDS_QUOTING = (",", '"', "\n")


def escape_csv_value(value: object) -> str:
    if value is None:
        return ""
    text = str(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def _yes_no(value: object) -> str:
    return "Yes" if value else "No"


def candidate_row(candidate: Candidate) -> list[str]:
    """The 15 export columns for one candidate, unescaped."""
    c = candidate
    return [
        c.first_name,
        c.last_name,
        c.email,
        c.university,
        c.major,
        str(c.graduation_year) if c.graduation_year else "",
        str(c.video_count),
        _yes_no(c.video1),
        _yes_no(c.video2),
        _yes_no(c.video3),
        "; ".join(c.skills),
        "; ".join(c.culture_tags),
        c.linkedin_url,
        c.github_url,
        c.resume,
    ]


def candidates_to_csv(candidates: list[Candidate]) -> str:
    """Render ``candidates`` as a CSV document (header first, no trailing newline)."""
    lines = [",".join(escape_csv_value(h) for h in CSV_HEADERS)]
    for c in candidates:
        lines.append(",".join(escape_csv_value(v) for v in candidate_row(c)))
    return "\n".join(lines)


def export_filename(
    prefix: str = "drafted-candidates",
    selected: bool = False,
    today: date | None = None,
) -> str:
    """``<prefix>-<YYYY-MM-DD>.csv``, or ``<prefix>-selected-<YYYY-MM-DD>.csv``."""
    stamp = (today or datetime.now(timezone.utc).date()).isoformat()
    middle = "-selected" if selected else ""
    return f"{prefix}{middle}-{stamp}.csv"
