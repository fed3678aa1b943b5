# backend/eduvibe/services/__init__.py
"""
Service layer for EduVibe.

Services own business rules and transactions; repositories own queries.
"""

from .base import BaseService
from .conflict_checker import ConflictChecker, derive_end_time, intervals_overlap, is_available
from .matching_service import (
    MatchingService,
    filter_candidates,
    is_compatible,
    match,
    rank_candidates,
    score_candidate,
)
from .ratings_math import running_average
from .session_lifecycle import transition
from .session_service import SessionService

__all__ = [
    "BaseService",
    "ConflictChecker",
    "MatchingService",
    "SessionService",
    "derive_end_time",
    "filter_candidates",
    "intervals_overlap",
    "is_available",
    "is_compatible",
    "match",
    "rank_candidates",
    "running_average",
    "score_candidate",
    "transition",
]
