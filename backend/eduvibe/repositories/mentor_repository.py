# backend/eduvibe/repositories/mentor_repository.py
"""
Mentor Repository for EduVibe

Data access for mentor profiles. The matcher and mentor search read the
approved pool; student feedback takes a locked read to update a mentor's
aggregate rating.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..database.session_utils import lock_for_update
from ..models.mentor import MentorProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class MentorRepository(BaseRepository[MentorProfile]):
    """Repository for mentor profile data access."""

    def __init__(self, db: Session):
        """Initialize with MentorProfile model."""
        super().__init__(db, MentorProfile)

    def get_eligible_mentors(self) -> List[MentorProfile]:
        """
        Get every mentor that is both approved and verified.

        Ordered by creation time so ranking ties resolve the same way on
        every call.
        """
        try:
            return (
                self.db.query(MentorProfile)
                .filter(
                    MentorProfile.is_approved.is_(True),
                    MentorProfile.is_verified.is_(True),
                )
                .order_by(MentorProfile.created_at, MentorProfile.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting eligible mentors: {str(e)}")
            raise RepositoryException(f"Failed to get eligible mentors: {str(e)}")

    def get_mentors_for_search(self, min_rating: Optional[float] = None) -> List[MentorProfile]:
        """
        Get the approved and verified pool for browsing, best rated first.

        Args:
            min_rating: Optional lower bound on the aggregate rating (inclusive)

        Returns:
            Mentors ordered by rating descending, then by creation time
        """
        try:
            query = self.db.query(MentorProfile).filter(
                MentorProfile.is_approved.is_(True),
                MentorProfile.is_verified.is_(True),
            )
            if min_rating is not None:
                query = query.filter(MentorProfile.rating >= min_rating)
            return query.order_by(
                MentorProfile.rating.desc(), MentorProfile.created_at, MentorProfile.id
            ).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching mentors: {str(e)}")
            raise RepositoryException(f"Failed to search mentors: {str(e)}")

    def get_for_update(self, mentor_id: str) -> Optional[MentorProfile]:
        """
        Load a mentor with a row lock for a read-modify-write.

        Must be called inside the service transaction that writes the row.
        """
        try:
            query = self.db.query(MentorProfile).filter(MentorProfile.id == mentor_id)
            return lock_for_update(query, self.db).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking mentor {mentor_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock mentor: {str(e)}")
