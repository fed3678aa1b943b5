# backend/eduvibe/models/mentor.py
"""
Mentor profile model for EduVibe.

Only the fields the matching and scheduling core reads or writes are
modelled here: what the mentor teaches, which grade bands and languages they
support, the admin approval/verification flags, and the aggregate rating that
student feedback updates.
"""

from datetime import datetime, timezone
import logging
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Float, Index, Integer, String

from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class MentorProfile(Base):
    """
    Mentor profile as persisted after onboarding.

    New mentors start unapproved and unverified with a zero rating; only
    mentors with both flags set enter the matching pool.
    """

    __tablename__ = "mentor_profiles"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)

    # Areas of expertise
    teaching_subjects = Column(JSON, nullable=False, default=list)
    preferred_student_levels = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)

    # Admin gates
    is_approved = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)

    # Aggregate rating maintained from student feedback
    rating = Column(Float, nullable=False, default=0.0)
    total_sessions = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_mentor_profiles_rating_range"),
        CheckConstraint("total_sessions >= 0", name="ck_mentor_profiles_total_sessions"),
        Index("idx_mentor_profiles_eligible", "is_approved", "is_verified"),
    )

    def __repr__(self) -> str:
        return (
            f"<MentorProfile {self.id}: rating={self.rating}, "
            f"sessions={self.total_sessions}, approved={self.is_approved}, "
            f"verified={self.is_verified}>"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "teaching_subjects": list(self.teaching_subjects or []),
            "preferred_student_levels": list(self.preferred_student_levels or []),
            "languages": list(self.languages or []),
            "is_approved": self.is_approved,
            "is_verified": self.is_verified,
            "rating": self.rating,
            "total_sessions": self.total_sessions,
        }
