# backend/eduvibe/schemas/__init__.py
"""Pydantic schemas validated at the boundary of the scheduling core."""

from .matching import (
    MatchResult,
    MentorCandidate,
    MentorSearchFilters,
    StudentPreferences,
    normalize_tokens,
)
from .session import (
    CancelPayload,
    ConfirmPayload,
    Feedback,
    SessionCreate,
    SessionSlot,
    SessionStatistics,
)

__all__ = [
    "CancelPayload",
    "ConfirmPayload",
    "Feedback",
    "MatchResult",
    "MentorCandidate",
    "MentorSearchFilters",
    "SessionCreate",
    "SessionSlot",
    "SessionStatistics",
    "StudentPreferences",
    "normalize_tokens",
]
