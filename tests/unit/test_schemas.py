"""Tests for core schemas: Candidate, FilterCriteria, VideoFilter."""

import pytest
from pydantic import ValidationError

from drafted.core.schemas import Candidate, FilterCriteria, VideoFilter


class TestCandidate:
    def test_parses_document_shape(self) -> None:
        c = Candidate.model_validate({
            "id": "ada@example.com",
            "email": "ada@example.com",
            "firstName": "Ada",
            "lastName": "Lovelace",
            "graduationYear": 2026,
            "culture": {"cultureTags": ["Innovation"], "cultureDescriptions": ["Builds things."]},
            "linkedInURL": "https://linkedin.com/in/ada",
            "gitHubURL": "https://github.com/ada",
            "createdAt": "2025-01-01T00:00:00",
            "unknownField": "ignored",
        })
        assert c.first_name == "Ada"
        assert c.graduation_year == 2026
        assert c.culture_tags == ("Innovation",)
        assert c.linkedin_url == "https://linkedin.com/in/ada"

    def test_snake_case_names_accepted(self) -> None:
        c = Candidate(id="1", first_name="Grace")
        assert c.first_name == "Grace"

    def test_missing_fields_default_empty(self) -> None:
        c = Candidate(id="1")
        assert c.email == ""
        assert c.skills == ()
        assert c.transcripts == ()
        assert c.culture_tags == ()
        assert c.graduation_year_text == ""
        assert c.video_count == 0

    def test_nulls_become_empty(self) -> None:
        c = Candidate.model_validate({"id": "1", "skills": None, "major": None, "culture": None})
        assert c.skills == ()
        assert c.major == ""
        assert c.culture_tags == ()

    def test_non_string_list_entries_dropped(self) -> None:
        c = Candidate.model_validate({
            "id": "1",
            "skills": ["Python", None, 3],
            "transcripts": ["I speak French", {"bad": True}],
            "culture": {"cultureTags": ["Teamwork", None]},
        })
        assert c.skills == ("Python",)
        assert c.transcripts == ("I speak French",)
        assert c.culture_tags == ("Teamwork",)

    def test_wrong_shapes_degrade_to_empty(self) -> None:
        c = Candidate.model_validate({
            "id": "1",
            "culture": "n/a",
            "skills": "Python",
            "major": 42,
            "graduationYear": ["2026"],
            "video1": True,
        })
        assert c.culture is None
        assert c.skills == ()
        assert c.major == ""
        assert c.graduation_year is None
        assert c.video_count == 0

    def test_whole_float_year_kept(self) -> None:
        assert Candidate.model_validate({"id": "1", "graduationYear": 2026.0}).graduation_year == 2026

    def test_graduation_year_string_kept(self) -> None:
        c = Candidate.model_validate({"id": "1", "graduationYear": "2027"})
        assert c.graduation_year_text == "2027"

    def test_video_count_by_truthiness(self) -> None:
        c = Candidate(id="1", video1="https://v/1", video2="", video3="https://v/3")
        assert c.video_count == 2

    def test_frozen(self) -> None:
        c = Candidate(id="1")
        with pytest.raises(ValidationError):
            c.major = "Physics"  # type: ignore[misc]

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            Candidate.model_validate({"email": "x@example.com"})


class TestFilterCriteria:
    def test_defaults_inactive(self) -> None:
        assert FilterCriteria().has_active_filters is False

    def test_whitespace_query_inactive(self) -> None:
        assert FilterCriteria(search_query="   ").has_active_filters is False

    def test_query_active(self) -> None:
        assert FilterCriteria(search_query=" mit ").has_active_filters is True

    def test_selection_active(self) -> None:
        assert FilterCriteria(majors=frozenset({"Math"})).has_active_filters is True

    def test_video_filter_active(self) -> None:
        assert FilterCriteria(video_filter=VideoFilter.HAS_1).has_active_filters is True

    def test_normalized_query(self) -> None:
        assert FilterCriteria(search_query="  StanFord ").normalized_query == "stanford"

    def test_hashable_and_equal(self) -> None:
        a = FilterCriteria(majors=frozenset({"Math", "CS"}))
        b = FilterCriteria(majors=frozenset({"CS", "Math"}))
        assert a == b
        assert hash(a) == hash(b)

    def test_video_filter_from_string(self) -> None:
        assert FilterCriteria(video_filter="has2+").video_filter is VideoFilter.HAS_2_PLUS  # type: ignore[arg-type]

    def test_invalid_video_filter(self) -> None:
        with pytest.raises(ValidationError):
            FilterCriteria(video_filter="has4")  # type: ignore[arg-type]
