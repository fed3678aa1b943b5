# backend/tests/unit/schemas/test_matching_schemas.py
from types import SimpleNamespace

from pydantic import ValidationError
import pytest

from eduvibe.core.enums import MentorEducationLevel, StudentEducationLevel
from eduvibe.schemas.matching import (
    MentorCandidate,
    MentorSearchFilters,
    StudentPreferences,
    normalize_tokens,
)


class TestNormalizeTokens:
    def test_splits_free_text(self):
        assert normalize_tokens(" Mathematics,Physics , ") == ("mathematics", "physics")

    def test_lists_are_lowercased_and_deduped(self):
        assert normalize_tokens(["English", "english", "Sinhala"]) == ("english", "sinhala")

    def test_none_is_empty(self):
        assert normalize_tokens(None) == ()


class TestStudentPreferences:
    def test_from_profile(self):
        profile = SimpleNamespace(
            id="student-1",
            subjects_of_interest="Biology, Chemistry",
            current_education_level="advanced_level",
            languages=["Tamil"],
            grade_levels=None,
        )

        prefs = StudentPreferences.from_profile(profile)

        assert prefs.subjects == ("biology", "chemistry")
        assert prefs.education_level is StudentEducationLevel.ADVANCED_LEVEL
        assert prefs.languages == ("tamil",)
        assert prefs.grade_levels == ()

    def test_unknown_education_level_rejected(self):
        with pytest.raises(ValidationError):
            StudentPreferences(education_level="university")


class TestMentorCandidate:
    def test_levels_deduped_in_order(self):
        mentor = MentorCandidate(id="m", levels=["grade_6_9", "grade_3_5", "grade_6_9"])

        assert mentor.levels == (MentorEducationLevel.GRADE_6_9, MentorEducationLevel.GRADE_3_5)

    @pytest.mark.parametrize("rating", [-0.1, 5.1])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError):
            MentorCandidate(id="m", rating=rating)

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError):
            MentorCandidate(id="  ")

    def test_is_frozen(self):
        mentor = MentorCandidate(id="m")

        with pytest.raises(ValidationError):
            mentor.rating = 4.0


class TestMentorSearchFilters:
    def test_defaults_filter_nothing(self):
        filters = MentorSearchFilters()

        assert filters.subjects == ()
        assert filters.education_levels == ()
        assert filters.languages == ()
        assert filters.min_rating is None

    def test_tokens_normalized(self):
        filters = MentorSearchFilters(subjects=" Physics, physics ", languages=["Sinhala"])

        assert filters.subjects == ("physics",)
        assert filters.languages == ("sinhala",)

    def test_single_level_accepted(self):
        filters = MentorSearchFilters(education_levels="advanced_level")

        assert filters.education_levels == (MentorEducationLevel.ADVANCED_LEVEL,)

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            MentorSearchFilters(education_levels=["university"])

    @pytest.mark.parametrize("rating", [-1.0, 5.5])
    def test_min_rating_range(self, rating):
        with pytest.raises(ValidationError):
            MentorSearchFilters(min_rating=rating)
