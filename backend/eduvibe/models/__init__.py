"""SQLAlchemy models for the EduVibe scheduling core."""

from .mentor import MentorProfile
from .session import MentorSession
from .student import StudentProfile

__all__ = ["MentorProfile", "MentorSession", "StudentProfile"]
