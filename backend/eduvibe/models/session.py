# backend/eduvibe/models/session.py
"""
Mentor session model for EduVibe.

A session is a self-contained record of one two-hour block between a student
and a mentor. It stores the calendar date and wall-clock start/end directly so
conflict checks never need anything but session rows.

Sessions are never deleted: cancellation and no-show are statuses, and those
two statuses free the mentor's slot for new bookings.
"""

from datetime import date, datetime, time
import logging
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
)

from ..core.constants import SESSION_DURATION_MINUTES
from ..core.enums import NON_BLOCKING_STATUSES, PaymentStatus, SessionStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class MentorSession(Base):
    """
    Booked session between a student and a mentor.

    Created in ``pending``; every later status change goes through the
    lifecycle state machine in ``services.session_lifecycle``.
    """

    __tablename__ = "mentor_sessions"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    student_id = Column(String(26), ForeignKey("student_profiles.id"), nullable=False, index=True)
    mentor_id = Column(String(26), ForeignKey("mentor_profiles.id"), nullable=False)

    # Slot
    subject = Column(String(255), nullable=False)
    education_level = Column(String(32), nullable=False)
    session_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=SESSION_DURATION_MINUTES)

    # Status and payment
    status = Column(String(20), nullable=False, default=SessionStatus.PENDING.value, index=True)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    payment_proof_url = Column(Text, nullable=True)

    # Session content
    topic = Column(String(255), nullable=True)
    learning_objectives = Column(JSON, nullable=True)

    # Feedback, set only after completion
    student_rating = Column(Integer, nullable=True)
    student_feedback = Column(Text, nullable=True)
    mentor_rating = Column(Integer, nullable=True)
    mentor_feedback = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Cancellation tracking
    cancelled_by_id = Column(String(26), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'no_show')",
            name="ck_mentor_sessions_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'confirmed', 'failed', 'refunded')",
            name="ck_mentor_sessions_payment_status",
        ),
        CheckConstraint(
            f"duration_minutes = {SESSION_DURATION_MINUTES}",
            name="ck_mentor_sessions_duration",
        ),
        CheckConstraint(
            "student_rating IS NULL OR (student_rating >= 1 AND student_rating <= 5)",
            name="ck_mentor_sessions_student_rating",
        ),
        CheckConstraint(
            "mentor_rating IS NULL OR (mentor_rating >= 1 AND mentor_rating <= 5)",
            name="ck_mentor_sessions_mentor_rating",
        ),
        CheckConstraint("start_time < end_time", name="ck_mentor_sessions_time_order"),
        Index("idx_mentor_sessions_mentor_date", "mentor_id", "session_date"),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize as a pending, unpaid session."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = SessionStatus.PENDING.value
        if not self.payment_status:
            self.payment_status = PaymentStatus.PENDING.value
        if self.duration_minutes is None:
            self.duration_minutes = SESSION_DURATION_MINUTES

    def __repr__(self) -> str:
        return (
            f"<MentorSession {self.id}: student={self.student_id}, "
            f"mentor={self.mentor_id}, date={self.session_date}, "
            f"time={self.start_time}-{self.end_time}, status={self.status}>"
        )

    @property
    def session_status(self) -> SessionStatus:
        return SessionStatus(self.status)

    @property
    def blocks_slot(self) -> bool:
        """Check if this session occupies the mentor's time."""
        return self.session_status not in NON_BLOCKING_STATUSES

    def involves(self, user_id: str) -> bool:
        return user_id in (self.student_id, self.mentor_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""

        def _iso(value: Optional[date | time | datetime]) -> Optional[str]:
            return value.isoformat() if value else None

        return {
            "id": self.id,
            "student_id": self.student_id,
            "mentor_id": self.mentor_id,
            "subject": self.subject,
            "education_level": self.education_level,
            "session_date": _iso(self.session_date),
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "duration_minutes": self.duration_minutes,
            "status": self.status,
            "payment_status": self.payment_status,
            "payment_proof_url": self.payment_proof_url,
            "topic": self.topic,
            "learning_objectives": self.learning_objectives,
            "student_rating": self.student_rating,
            "student_feedback": self.student_feedback,
            "mentor_rating": self.mentor_rating,
            "mentor_feedback": self.mentor_feedback,
            "created_at": _iso(self.created_at),
            "confirmed_at": _iso(self.confirmed_at),
            "completed_at": _iso(self.completed_at),
            "cancelled_at": _iso(self.cancelled_at),
            "cancelled_by_id": self.cancelled_by_id,
            "cancellation_reason": self.cancellation_reason,
        }
