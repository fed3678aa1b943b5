# backend/eduvibe/repositories/factory.py
"""
Repository Factory for EduVibe

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from ..models.student import StudentProfile
    from .mentor_repository import MentorRepository
    from .session_repository import SessionRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_base_repository(db: Session, model) -> BaseRepository:
        """
        Create a generic base repository for any model.

        Args:
            db: Database session
            model: SQLAlchemy model class

        Returns:
            BaseRepository instance
        """
        return BaseRepository(db, model)

    @staticmethod
    def create_session_repository(db: Session) -> "SessionRepository":
        """Create repository for mentor session operations."""
        from .session_repository import SessionRepository

        return SessionRepository(db)

    @staticmethod
    def create_mentor_repository(db: Session) -> "MentorRepository":
        """Create repository for mentor profile operations."""
        from .mentor_repository import MentorRepository

        return MentorRepository(db)

    @staticmethod
    def create_student_repository(db: Session) -> "BaseRepository[StudentProfile]":
        """Create repository for student profile lookups."""
        from ..models.student import StudentProfile

        return RepositoryFactory.create_base_repository(db, StudentProfile)
