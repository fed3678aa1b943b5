# backend/eduvibe/services/conflict_checker.py
"""
Conflict Checker Service for EduVibe

Handles mentor double-booking detection:
- Deriving a session's end time from its start and duration
- Half-open interval overlap tests
- Checking a proposed slot against a mentor's sessions on that date

The module-level functions are pure predicates over sessions the caller has
already fetched. ``ConflictChecker`` adds the repository read for callers that
only have ids.

Cancelled and no-show sessions never block. Pending sessions do, whichever
student placed them, exactly like confirmed and completed ones.
"""

from datetime import date, time
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

from sqlalchemy.orm import Session

from ..core.exceptions import ValidationException
from ..repositories.factory import RepositoryFactory
from ..repositories.session_repository import SessionRepository
from ..utils.time_utils import add_minutes, time_to_string
from .base import BaseService

logger = logging.getLogger(__name__)


class SessionTimes(Protocol):
    """Shape of anything the overlap test can read (MentorSession rows)."""

    id: Any
    mentor_id: Any
    session_date: Any
    start_time: Any
    end_time: Any
    blocks_slot: bool


def derive_end_time(start_time: time, duration_minutes: int) -> time:
    """
    Compute a session's end wall-clock time.

    Works on minutes since midnight and wraps modulo 1440, so 23:00 plus
    120 minutes gives 01:00. Session creation rejects such wrapped slots;
    this function only does the arithmetic.

    Raises:
        ValidationException: If duration is negative
    """
    if duration_minutes < 0:
        raise ValidationException(
            "Duration must not be negative",
            details={"duration_minutes": duration_minutes},
        )
    return add_minutes(start_time, duration_minutes)


def intervals_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open [start, end) overlap: back-to-back intervals do not overlap."""
    return start_a < end_b and end_a > start_b


def find_conflicts(
    mentor_id: str,
    session_date: date,
    start_time: time,
    end_time: time,
    existing_sessions: Iterable[SessionTimes],
    exclude_session_id: Optional[str] = None,
) -> List[SessionTimes]:
    """
    Return the existing sessions that a proposed slot would overlap.

    Sessions belonging to another mentor or date, the excluded session, and
    cancelled or no-show sessions are ignored.
    """
    return [
        session
        for session in existing_sessions
        if session.mentor_id == mentor_id
        and session.session_date == session_date
        and session.id != exclude_session_id
        and session.blocks_slot
        and intervals_overlap(start_time, end_time, session.start_time, session.end_time)
    ]


def is_available(
    mentor_id: str,
    session_date: date,
    start_time: time,
    end_time: time,
    existing_sessions: Iterable[SessionTimes],
) -> bool:
    """
    Check whether a mentor is free for [start_time, end_time) on a date.

    Pure predicate: never raises, never fetches. Turning ``False`` into a
    booking error is the caller's job.
    """
    return not find_conflicts(mentor_id, session_date, start_time, end_time, existing_sessions)


class ConflictChecker(BaseService):
    """
    Service for checking mentor session conflicts.

    Centralizes conflict detection so session creation and availability
    lookups apply the same rules.
    """

    def __init__(self, db: Session, repository: Optional[SessionRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional SessionRepository instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_session_repository(db)

    @BaseService.measure_operation("get_conflicting_sessions")
    def get_conflicting_sessions(
        self,
        mentor_id: str,
        session_date: date,
        start_time: time,
        end_time: time,
        exclude_session_id: Optional[str] = None,
        *,
        lock: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Check if a time range conflicts with the mentor's sessions.

        Args:
            mentor_id: The mentor to check
            session_date: The date to check
            start_time: Start time of the range to check
            end_time: End time of the range to check
            exclude_session_id: Optional session ID to exclude from check
            lock: Lock the mentor's rows for that date (inside a write transaction)

        Returns:
            List of conflicts with session details
        """
        sessions = self.repository.get_sessions_for_mentor_on_date(
            mentor_id, session_date, lock=lock
        )
        conflicts = [
            {
                "session_id": session.id,
                "start_time": time_to_string(session.start_time),
                "end_time": time_to_string(session.end_time),
                "student_id": session.student_id,
                "subject": session.subject,
                "status": session.status,
            }
            for session in find_conflicts(
                mentor_id, session_date, start_time, end_time, sessions, exclude_session_id
            )
        ]

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} session conflicts for {mentor_id} "
                f"on {session_date} between {start_time}-{end_time}"
            )

        return conflicts

    @BaseService.measure_operation("check_availability")
    def check_availability(
        self,
        mentor_id: str,
        session_date: date,
        start_time: time,
        end_time: time,
        existing_sessions: Optional[Iterable[SessionTimes]] = None,
    ) -> bool:
        """
        Check whether the mentor is free for a slot.

        Uses ``existing_sessions`` when the caller already fetched them,
        otherwise loads the mentor's sessions for that date.
        """
        if existing_sessions is None:
            existing_sessions = self.repository.get_sessions_for_mentor_on_date(
                mentor_id, session_date
            )
        return is_available(mentor_id, session_date, start_time, end_time, existing_sessions)

    @BaseService.measure_operation("get_booked_times_for_date")
    def get_booked_times_for_date(self, mentor_id: str, target_date: date) -> List[Dict[str, Any]]:
        """
        Get the time ranges a mentor is already committed to on a date.

        Args:
            mentor_id: The mentor ID
            target_date: The date to check

        Returns:
            List of booked time ranges ordered by start time
        """
        sessions = self.repository.get_blocking_sessions_for_date(mentor_id, target_date)
        return [
            {
                "session_id": session.id,
                "start_time": time_to_string(session.start_time),
                "end_time": time_to_string(session.end_time),
                "status": session.status,
            }
            for session in sessions
        ]
