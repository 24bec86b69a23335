"""Tests for CSV export: escaping, column rules, filenames."""

import csv
import io
from datetime import date, datetime, timezone
from unittest.mock import patch

from drafted.core.schemas import Candidate, CultureProfile
from drafted.pipeline.export import (
    CSV_HEADERS,
    candidate_row,
    candidates_to_csv,
    escape_csv_value,
    export_filename,
)


def _candidate(**overrides: object) -> Candidate:
    defaults: dict[str, object] = {
        "id": "ada@example.com",
        "email": "ada@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "university": "Stanford University",
        "major": "Mathematics",
        "graduation_year": 2026,
        "skills": ("Python", "SQL"),
        "culture": CultureProfile(culture_tags=("Teamwork", "Integrity")),
        "linkedin_url": "https://linkedin.com/in/ada",
        "github_url": "https://github.com/ada",
        "resume": "https://files/ada.pdf",
        "video1": "https://v/1",
        "video2": None,
        "video3": "https://v/3",
    }
    defaults.update(overrides)
    return Candidate(**defaults)  # type: ignore[arg-type]


class TestEscapeCsvValue:
    def test_plain_value_raw(self) -> None:
        assert escape_csv_value("Stanford University") == "Stanford University"

    def test_comma_quoted(self) -> None:
        assert escape_csv_value("a,b") == '"a,b"'

    def test_quotes_doubled(self) -> None:
        assert escape_csv_value('say "hi"') == '"say ""hi"""'

    def test_newline_quoted(self) -> None:
        assert escape_csv_value("line1\nline2") == '"line1\nline2"'

    def test_none_is_empty(self) -> None:
        assert escape_csv_value(None) == ""

    def test_numbers_stringified(self) -> None:
        assert escape_csv_value(3) == "3"


class TestCandidateRow:
    def test_columns(self) -> None:
        row = candidate_row(_candidate())
        assert len(row) == len(CSV_HEADERS) == 15
        assert row == [
            "Ada",
            "Lovelace",
            "ada@example.com",
            "Stanford University",
            "Mathematics",
            "2026",
            "2",
            "Yes",
            "No",
            "Yes",
            "Python; SQL",
            "Teamwork; Integrity",
            "https://linkedin.com/in/ada",
            "https://github.com/ada",
            "https://files/ada.pdf",
        ]

    def test_missing_fields_render_empty(self) -> None:
        row = candidate_row(Candidate(id="x"))
        assert row == ["", "", "", "", "", "", "0", "No", "No", "No", "", "", "", "", ""]
        assert "None" not in row


class TestCandidatesToCsv:
    def test_header_first(self) -> None:
        text = candidates_to_csv([_candidate()])
        lines = text.split("\n")
        assert lines[0] == ",".join(CSV_HEADERS)
        assert len(lines) == 2

    def test_header_only_for_empty_list(self) -> None:
        assert candidates_to_csv([]) == ",".join(CSV_HEADERS)

    def test_quoted_major_round_trip(self) -> None:
        major = 'Biology, B.S. "Honors"'
        text = candidates_to_csv([_candidate(major=major)])
        assert '"Biology, B.S. ""Honors"""' in text

        rows = list(csv.reader(io.StringIO(text)))
        assert rows[1][CSV_HEADERS.index("Major")] == major

    def test_round_trip_with_newline(self) -> None:
        text = candidates_to_csv([_candidate(first_name="Multi\nLine")])
        rows = list(csv.reader(io.StringIO(text, newline="")))
        assert rows[1][0] == "Multi\nLine"
        assert len(rows) == 2

    def test_row_per_candidate_in_order(self) -> None:
        text = candidates_to_csv([_candidate(first_name="A"), _candidate(first_name="B")])
        rows = list(csv.reader(io.StringIO(text)))
        assert [r[0] for r in rows[1:]] == ["A", "B"]


class TestExportFilename:
    def test_filtered(self) -> None:
        assert export_filename(today=date(2025, 3, 7)) == "drafted-candidates-2025-03-07.csv"

    def test_selected(self) -> None:
        name = export_filename(selected=True, today=date(2025, 3, 7))
        assert name == "drafted-candidates-selected-2025-03-07.csv"

    def test_custom_prefix(self) -> None:
        assert export_filename("team", today=date(2025, 1, 1)) == "team-2025-01-01.csv"

    def test_default_date_is_utc(self) -> None:
        late_evening_utc = datetime(2025, 3, 7, 23, 30, tzinfo=timezone.utc)
        with patch("drafted.pipeline.export.datetime") as clock:
            clock.now.return_value = late_evening_utc
            assert export_filename() == "drafted-candidates-2025-03-07.csv"
        clock.now.assert_called_once_with(timezone.utc)
