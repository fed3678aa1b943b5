# backend/eduvibe/schemas/matching.py
"""
Value objects consumed and produced by the mentor matcher.

Profiles arrive from storage in loose shapes (free-text subject lists, mixed
casing, duplicates). They are normalized here, once, so the scorer only ever
sees well-formed lower-case token tuples.
"""

from typing import TYPE_CHECKING, Any, Iterable, Optional, Tuple

from pydantic import Field, field_validator

from ..core.constants import MAX_MENTOR_RATING, MIN_MENTOR_RATING
from ..core.enums import MentorEducationLevel, StudentEducationLevel
from ._strict_base import FrozenModel

if TYPE_CHECKING:
    from ..models.mentor import MentorProfile
    from ..models.student import StudentProfile


def normalize_tokens(value: Any) -> Tuple[str, ...]:
    """
    Normalize a free-text or list value into unique lower-case tokens.

    Strings are split on commas. Empty tokens are dropped and first-seen
    order is kept.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        raw: Iterable[Any] = value.split(",")
    else:
        raw = value

    tokens: list[str] = []
    for item in raw:
        token = str(item).strip().lower()
        if token and token not in tokens:
            tokens.append(token)
    return tuple(tokens)


class StudentPreferences(FrozenModel):
    """What a student asked for when requesting mentor suggestions."""

    student_id: Optional[str] = None
    subjects: Tuple[str, ...] = ()
    education_level: StudentEducationLevel
    languages: Tuple[str, ...] = ()
    grade_levels: Tuple[str, ...] = ()

    @field_validator("subjects", "languages", "grade_levels", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Tuple[str, ...]:
        return normalize_tokens(value)

    @classmethod
    def from_profile(cls, profile: "StudentProfile") -> "StudentPreferences":
        return cls(
            student_id=profile.id,
            subjects=profile.subjects_of_interest,
            education_level=profile.current_education_level,
            languages=profile.languages or (),
            grade_levels=profile.grade_levels or (),
        )


class MentorCandidate(FrozenModel):
    """Mentor as seen by the matcher."""

    id: str = Field(..., min_length=1)
    full_name: Optional[str] = None
    subjects: Tuple[str, ...] = ()
    levels: Tuple[MentorEducationLevel, ...] = ()
    languages: Tuple[str, ...] = ()
    rating: float = Field(default=0.0, ge=MIN_MENTOR_RATING, le=MAX_MENTOR_RATING)
    is_approved: bool = False
    is_verified: bool = False

    @field_validator("subjects", "languages", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Tuple[str, ...]:
        return normalize_tokens(value)

    @field_validator("levels", mode="before")
    @classmethod
    def _dedupe_levels(cls, value: Any) -> Tuple[Any, ...]:
        if value is None:
            return ()
        return tuple(dict.fromkeys(value))

    @classmethod
    def from_profile(cls, profile: "MentorProfile") -> "MentorCandidate":
        return cls(
            id=profile.id,
            full_name=profile.full_name,
            subjects=profile.teaching_subjects or (),
            levels=profile.preferred_student_levels or (),
            languages=profile.languages or (),
            rating=profile.rating or 0.0,
            is_approved=bool(profile.is_approved),
            is_verified=bool(profile.is_verified),
        )


class MatchResult(FrozenModel):
    """A candidate annotated with its match score."""

    mentor: MentorCandidate
    score: float = Field(..., ge=0.0)


class MentorSearchFilters(FrozenModel):
    """
    Optional filters for browsing the approved mentor pool.

    Every filter is optional; an empty filter set returns the whole pool.
    Subjects and languages are compared as normalized tokens, so casing and
    surrounding whitespace do not matter, but unlike the matcher there is no
    substring matching.
    """

    subjects: Tuple[str, ...] = ()
    education_levels: Tuple[MentorEducationLevel, ...] = ()
    languages: Tuple[str, ...] = ()
    min_rating: Optional[float] = Field(default=None, ge=MIN_MENTOR_RATING, le=MAX_MENTOR_RATING)

    @field_validator("subjects", "languages", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Tuple[str, ...]:
        return normalize_tokens(value)

    @field_validator("education_levels", mode="before")
    @classmethod
    def _dedupe_levels(cls, value: Any) -> Tuple[Any, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(dict.fromkeys(value))
