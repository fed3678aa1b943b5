# backend/eduvibe/repositories/session_repository.py
"""
Session Repository for EduVibe

Works exclusively with session rows. Conflict checks use the session's own
fields (session_date, start_time, end_time); there is no separate
availability calendar.
"""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import NON_BLOCKING_STATUSES, SessionStatus, UserRole
from ..core.exceptions import RepositoryException
from ..database.session_utils import lock_for_update
from ..models.session import MentorSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_BLOCKING_STATUS_VALUES = [s.value for s in SessionStatus if s not in NON_BLOCKING_STATUSES]
_UPCOMING_STATUS_VALUES = [SessionStatus.PENDING.value, SessionStatus.CONFIRMED.value]


class SessionRepository(BaseRepository[MentorSession]):
    """Repository for mentor session data access."""

    def __init__(self, db: Session):
        """Initialize with MentorSession model as primary."""
        super().__init__(db, MentorSession)

    def _user_column(self, role: UserRole):
        return MentorSession.student_id if role == UserRole.STUDENT else MentorSession.mentor_id

    # Conflict queries

    def get_sessions_for_mentor_on_date(
        self,
        mentor_id: str,
        session_date: date,
        *,
        lock: bool = False,
    ) -> List[MentorSession]:
        """
        Get all of a mentor's sessions on one calendar date, in any status.

        Args:
            mentor_id: The mentor to check
            session_date: The calendar date
            lock: Take row locks (call inside the write transaction)

        Returns:
            Sessions ordered by start time
        """
        try:
            query = (
                self.db.query(MentorSession)
                .filter(
                    MentorSession.mentor_id == mentor_id,
                    MentorSession.session_date == session_date,
                )
                .order_by(MentorSession.start_time)
            )
            if lock:
                query = lock_for_update(query, self.db)
            return query.all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting sessions for mentor on date: {str(e)}")
            raise RepositoryException(f"Failed to get mentor sessions: {str(e)}")

    def get_blocking_sessions_for_date(
        self,
        mentor_id: str,
        session_date: date,
        exclude_session_id: Optional[str] = None,
    ) -> List[MentorSession]:
        """
        Get the sessions that occupy a mentor's time on a date.

        Cancelled and no-show sessions are left out.
        """
        try:
            query = self.db.query(MentorSession).filter(
                MentorSession.mentor_id == mentor_id,
                MentorSession.session_date == session_date,
                MentorSession.status.in_(_BLOCKING_STATUS_VALUES),
            )
            if exclude_session_id:
                query = query.filter(MentorSession.id != exclude_session_id)
            return query.order_by(MentorSession.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting blocking sessions: {str(e)}")
            raise RepositoryException(f"Failed to get blocking sessions: {str(e)}")

    # Lifecycle reads

    def get_for_update(self, session_id: str) -> Optional[MentorSession]:
        """Load one session with a row lock for a status transition."""
        try:
            query = self.db.query(MentorSession).filter(MentorSession.id == session_id)
            return lock_for_update(query, self.db).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking session {session_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock session: {str(e)}")

    # User-facing queries

    def get_upcoming_sessions(
        self, user_id: str, role: UserRole, today: date
    ) -> List[MentorSession]:
        """Pending or confirmed sessions dated today or later, soonest first."""
        try:
            return (
                self.db.query(MentorSession)
                .filter(
                    self._user_column(role) == user_id,
                    MentorSession.session_date >= today,
                    MentorSession.status.in_(_UPCOMING_STATUS_VALUES),
                )
                .order_by(MentorSession.session_date, MentorSession.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting upcoming sessions: {str(e)}")
            raise RepositoryException(f"Failed to get upcoming sessions: {str(e)}")

    def get_past_sessions(self, user_id: str, role: UserRole, today: date) -> List[MentorSession]:
        """Sessions dated before today, newest first."""
        try:
            return (
                self.db.query(MentorSession)
                .filter(
                    self._user_column(role) == user_id,
                    MentorSession.session_date < today,
                )
                .order_by(MentorSession.session_date.desc(), MentorSession.start_time.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting past sessions: {str(e)}")
            raise RepositoryException(f"Failed to get past sessions: {str(e)}")

    def get_sessions_for_user(self, user_id: str, role: UserRole) -> List[MentorSession]:
        try:
            return (
                self.db.query(MentorSession)
                .filter(self._user_column(role) == user_id)
                .order_by(MentorSession.session_date.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting sessions for user: {str(e)}")
            raise RepositoryException(f"Failed to get sessions: {str(e)}")

    def get_sessions_by_status(
        self,
        status: SessionStatus,
        user_id: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> List[MentorSession]:
        """
        Get sessions in one status, earliest first.

        Args:
            status: Status to filter on
            user_id: Optional participant to restrict to
            role: Which side of the session ``user_id`` is on (required with user_id)

        Returns:
            Sessions ordered by date and start time
        """
        try:
            query = self.db.query(MentorSession).filter(MentorSession.status == status.value)
            if user_id is not None:
                query = query.filter(self._user_column(role) == user_id)
            return query.order_by(MentorSession.session_date, MentorSession.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting sessions by status: {str(e)}")
            raise RepositoryException(f"Failed to get sessions by status: {str(e)}")

    def get_sessions_by_date_range(
        self,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> List[MentorSession]:
        """Sessions dated within [start_date, end_date], both ends inclusive."""
        try:
            query = self.db.query(MentorSession).filter(
                MentorSession.session_date >= start_date,
                MentorSession.session_date <= end_date,
            )
            if user_id is not None:
                query = query.filter(self._user_column(role) == user_id)
            return query.order_by(MentorSession.session_date, MentorSession.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting sessions by date range: {str(e)}")
            raise RepositoryException(f"Failed to get sessions by date range: {str(e)}")

    def get_sessions_by_student_and_date(
        self, student_id: str, session_date: date
    ) -> List[MentorSession]:
        try:
            return (
                self.db.query(MentorSession)
                .filter(
                    MentorSession.student_id == student_id,
                    MentorSession.session_date == session_date,
                )
                .order_by(MentorSession.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting sessions for student on date: {str(e)}")
            raise RepositoryException(f"Failed to get student sessions: {str(e)}")
