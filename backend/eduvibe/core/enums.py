# backend/eduvibe/core/enums.py
"""
Core enums for the EduVibe platform.

This module contains enumeration types used throughout the application
for type safety and consistency. All enums inherit from (str, Enum) so the
persisted value is the lower-case string, never the member name.
"""

from enum import Enum


class UserRole(str, Enum):
    """Which side of a session a caller is acting for."""

    STUDENT = "student"
    MENTOR = "mentor"


class StudentEducationLevel(str, Enum):
    """Education level a student declares during onboarding."""

    GRADE_9 = "grade_9"
    ORDINARY_LEVEL = "ordinary_level"
    ADVANCED_LEVEL = "advanced_level"


class MentorEducationLevel(str, Enum):
    """Grade bands a mentor is willing to teach."""

    GRADE_3_5 = "grade_3_5"
    GRADE_6_9 = "grade_6_9"
    GRADE_10_11 = "grade_10_11"
    ADVANCED_LEVEL = "advanced_level"


class SessionStatus(str, Enum):
    """Mentor session lifecycle statuses."""

    PENDING = "pending"  # Created, awaiting payment proof
    CONFIRMED = "confirmed"  # Payment proof attached
    COMPLETED = "completed"  # Session took place
    CANCELLED = "cancelled"  # Cancelled by student or mentor
    NO_SHOW = "no_show"  # Student didn't attend


class PaymentStatus(str, Enum):
    """Payment state tracked alongside the session status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    REFUNDED = "refunded"


class SessionEvent(str, Enum):
    """Events accepted by the session lifecycle state machine."""

    CONFIRM = "confirm"
    COMPLETE = "complete"
    CANCEL = "cancel"
    MARK_NO_SHOW = "mark_no_show"
    STUDENT_FEEDBACK = "student_feedback"
    MENTOR_FEEDBACK = "mentor_feedback"


# Statuses that free the mentor's slot
NON_BLOCKING_STATUSES = frozenset({SessionStatus.CANCELLED, SessionStatus.NO_SHOW})
