# backend/eduvibe/services/matching_service.py
"""
Matching Service for EduVibe

Ranks mentor candidates against a student's declared preferences using a
deterministic, rule-based score:

- +10 per mentor subject that fuzzy-matches a student interest
- +5 once if any mentor grade band maps to the student's education level
- +3 per shared language
- +0.5 x mentor rating

Subject matching is deliberately fuzzy: a mentor subject matches when either
string contains the other ("math" matches "mathematics" and vice versa).
Replacing it with exact tag matching would change rankings.

Scoring and filtering are pure. The only I/O is the pool fetch in
``find_matching_mentors`` and ``search_mentors``, which load approved and
verified mentors.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy.orm import Session

from ..core.config import MatchWeights, settings
from ..core.enums import MentorEducationLevel, StudentEducationLevel
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.mentor_repository import MentorRepository
from ..schemas.matching import (
    MatchResult,
    MentorCandidate,
    MentorSearchFilters,
    StudentPreferences,
)
from .base import BaseService

logger = logging.getLogger(__name__)

# Mentor grade band -> student education level it serves.
# Both primary bands collapse onto grade_9; kept as found in the onboarding
# forms until product clarifies the intended mapping.
MENTOR_LEVEL_TO_STUDENT_LEVEL: Dict[MentorEducationLevel, StudentEducationLevel] = {
    MentorEducationLevel.GRADE_3_5: StudentEducationLevel.GRADE_9,
    MentorEducationLevel.GRADE_6_9: StudentEducationLevel.GRADE_9,
    MentorEducationLevel.GRADE_10_11: StudentEducationLevel.ORDINARY_LEVEL,
    MentorEducationLevel.ADVANCED_LEVEL: StudentEducationLevel.ADVANCED_LEVEL,
}


def subjects_match(mentor_subject: str, student_subject: str) -> bool:
    """Case-insensitive substring containment in either direction."""
    a = mentor_subject.lower()
    b = student_subject.lower()
    return a in b or b in a


def count_subject_matches(mentor: MentorCandidate, student: StudentPreferences) -> int:
    """Number of the mentor's subjects that match at least one student interest."""
    return sum(
        1
        for subject in mentor.subjects
        if any(subjects_match(subject, interest) for interest in student.subjects)
    )


def is_level_compatible(mentor: MentorCandidate, student: StudentPreferences) -> bool:
    return any(
        MENTOR_LEVEL_TO_STUDENT_LEVEL.get(level) == student.education_level
        for level in mentor.levels
    )


def count_shared_languages(mentor: MentorCandidate, student: StudentPreferences) -> int:
    student_languages = set(student.languages)
    return sum(1 for language in mentor.languages if language in student_languages)


def is_compatible(mentor: MentorCandidate, student: StudentPreferences) -> bool:
    """Hard filter: at least one subject match and a level match."""
    return count_subject_matches(mentor, student) > 0 and is_level_compatible(mentor, student)


def filter_candidates(
    candidates: Sequence[MentorCandidate], filters: MentorSearchFilters
) -> List[MentorCandidate]:
    """
    Apply browse filters to a candidate pool, keeping pool order.

    Each non-empty filter must be satisfied by at least one of the mentor's
    values. Subjects are compared as exact normalized tokens.
    """
    subjects = set(filters.subjects)
    levels = set(filters.education_levels)
    languages = set(filters.languages)
    return [
        mentor
        for mentor in candidates
        if (not subjects or subjects.intersection(mentor.subjects))
        and (not levels or levels.intersection(mentor.levels))
        and (not languages or languages.intersection(mentor.languages))
        and (filters.min_rating is None or mentor.rating >= filters.min_rating)
    ]


def score_candidate(
    student: StudentPreferences,
    mentor: MentorCandidate,
    weights: Optional[MatchWeights] = None,
) -> float:
    """
    Compute one mentor's match score for a student.

    Args:
        student: Normalized student preferences
        mentor: Candidate mentor
        weights: Scoring weights (defaults to configured weights)

    Returns:
        Non-negative score
    """
    w = weights or settings.match_weights
    score = count_subject_matches(mentor, student) * w.subject
    if is_level_compatible(mentor, student):
        score += w.level
    score += count_shared_languages(mentor, student) * w.language
    score += mentor.rating * w.rating
    return score


def rank_candidates(
    student: StudentPreferences,
    candidates: Sequence[MentorCandidate],
    weights: Optional[MatchWeights] = None,
) -> List[MatchResult]:
    """
    Score every candidate and sort by descending score.

    ``sorted`` is stable, so candidates with equal scores keep their input
    order. Eligibility flags are not re-checked; callers pass an already
    filtered pool.
    """
    scored = [
        MatchResult(mentor=mentor, score=score_candidate(student, mentor, weights))
        for mentor in candidates
    ]
    return sorted(scored, key=lambda result: result.score, reverse=True)


def match(
    student: StudentPreferences,
    candidates: Sequence[MentorCandidate],
    weights: Optional[MatchWeights] = None,
) -> List[MentorCandidate]:
    """Rank candidates and return them without their scores."""
    return [result.mentor for result in rank_candidates(student, candidates, weights)]


class MatchingService(BaseService):
    """
    Service for suggesting mentors to students.

    Wraps the pure scorer with the eligible-pool fetch so callers can ask for
    suggestions with nothing but a student's preferences.
    """

    def __init__(
        self,
        db: Session,
        mentor_repository: Optional[MentorRepository] = None,
        weights: Optional[MatchWeights] = None,
    ):
        """
        Initialize matching service.

        Args:
            db: Database session
            mentor_repository: Optional MentorRepository instance
            weights: Optional scoring weights override
        """
        super().__init__(db)
        self.mentor_repository = mentor_repository or RepositoryFactory.create_mentor_repository(db)
        self.weights = weights or settings.match_weights

    def match(
        self, student: StudentPreferences, candidates: Sequence[MentorCandidate]
    ) -> List[MentorCandidate]:
        return match(student, candidates, self.weights)

    def rank_candidates(
        self, student: StudentPreferences, candidates: Sequence[MentorCandidate]
    ) -> List[MatchResult]:
        prometheus_metrics.observe_match_pool(len(candidates))
        return rank_candidates(student, candidates, self.weights)

    @BaseService.measure_operation("get_eligible_candidates")
    def get_eligible_candidates(self) -> List[MentorCandidate]:
        """Load approved and verified mentors as match candidates."""
        return [
            MentorCandidate.from_profile(profile)
            for profile in self.mentor_repository.get_eligible_mentors()
        ]

    @BaseService.measure_operation("find_matching_mentors")
    def find_matching_mentors(
        self,
        student: StudentPreferences,
        *,
        with_scores: bool = False,
        require_compatible: bool = False,
    ) -> List[MentorCandidate] | List[MatchResult]:
        """
        Suggest mentors for a student from the eligible pool.

        Args:
            student: Student preferences
            with_scores: Return MatchResult objects instead of bare candidates
            require_compatible: Drop mentors without both a subject match and a
                level match before ranking

        Returns:
            Ranked candidates (or scored results)
        """
        candidates = self.get_eligible_candidates()
        if require_compatible:
            candidates = [mentor for mentor in candidates if is_compatible(mentor, student)]
        results = self.rank_candidates(student, candidates)
        self.logger.info(
            f"Ranked {len(results)} mentors for student {student.student_id or '<anonymous>'}"
        )
        if with_scores:
            return results
        return [result.mentor for result in results]

    @BaseService.measure_operation("search_mentors")
    def search_mentors(
        self, filters: Union[MentorSearchFilters, Mapping[str, Any], None] = None
    ) -> List[MentorCandidate]:
        """
        Browse approved and verified mentors, best rated first.

        Args:
            filters: Subjects, education levels, languages and minimum rating;
                omitted filters match every mentor

        Returns:
            Matching candidates ordered by rating descending

        Raises:
            ValidationException: Malformed filters
        """
        criteria = self.parse_request(MentorSearchFilters, {} if filters is None else filters)
        pool = [
            MentorCandidate.from_profile(profile)
            for profile in self.mentor_repository.get_mentors_for_search(criteria.min_rating)
        ]
        results = filter_candidates(pool, criteria)
        self.log_operation("search_mentors", pool=len(pool), results=len(results))
        return results
