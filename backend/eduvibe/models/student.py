# backend/eduvibe/models/student.py
"""Student profile model for EduVibe."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base


class StudentProfile(Base):
    """Student profile holding the preferences used for mentor matching."""

    __tablename__ = "student_profiles"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)

    current_education_level = Column(String(32), nullable=False)
    # Free text, comma separated ("Mathematics, Physics")
    subjects_of_interest = Column(Text, nullable=False, default="")
    languages = Column(JSON, nullable=False, default=list)
    grade_levels = Column(JSON, nullable=False, default=list)

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
        CheckConstraint(
            "current_education_level IN ('grade_9', 'ordinary_level', 'advanced_level')",
            name="ck_student_profiles_education_level",
        ),
    )

    def __repr__(self) -> str:
        return f"<StudentProfile {self.id}: level={self.current_education_level}>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "current_education_level": self.current_education_level,
            "subjects_of_interest": self.subjects_of_interest,
            "languages": list(self.languages or []),
            "grade_levels": list(self.grade_levels or []),
        }
