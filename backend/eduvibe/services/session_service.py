# backend/eduvibe/services/session_service.py
"""
Session Service for EduVibe

Handles all mentor session business logic:
- Creating sessions (future-only, fixed two-hour blocks, conflict-free)
- Lifecycle changes: confirm, complete, cancel, no-show
- Feedback, including the mentor's aggregate rating
- Session queries (by participant, status, date range) and per-user statistics

Every public operation takes the caller's id explicitly as ``actor_id``.
Writes happen inside ``self.transaction()``; any exception rolls the whole
operation back, so a failed booking never leaves a partial row.
"""

from collections import Counter
from datetime import date
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from sqlalchemy.orm import Session

from ..core.clock import Clock, SystemClock, localize, today
from ..core.enums import SessionEvent, SessionStatus, UserRole
from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    SessionConflictException,
    ValidationException,
)
from ..models.mentor import MentorProfile
from ..models.session import MentorSession
from ..models.student import StudentProfile
from ..repositories.base_repository import BaseRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.mentor_repository import MentorRepository
from ..repositories.session_repository import SessionRepository
from ..schemas.session import (
    CancelPayload,
    ConfirmPayload,
    Feedback,
    SessionCreate,
    SessionStatistics,
)
from ..utils.time_utils import time_to_string
from .base import BaseService
from .conflict_checker import ConflictChecker
from .ratings_math import running_average
from .session_lifecycle import transition

logger = logging.getLogger(__name__)


class SessionService(BaseService):
    """
    Service layer for mentor session operations.

    Centralizes session business logic and coordinates the conflict checker,
    the lifecycle state machine and the rating aggregate.
    """

    def __init__(
        self,
        db: Session,
        session_repository: Optional[SessionRepository] = None,
        mentor_repository: Optional[MentorRepository] = None,
        student_repository: Optional[BaseRepository[StudentProfile]] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize session service.

        Args:
            db: Database session
            session_repository: Optional SessionRepository instance
            mentor_repository: Optional MentorRepository instance
            student_repository: Optional student profile repository
            conflict_checker: Optional ConflictChecker instance
            clock: Optional clock (defaults to the platform timezone wall clock)
        """
        super().__init__(db)
        self.repository = session_repository or RepositoryFactory.create_session_repository(db)
        self.mentor_repository = mentor_repository or RepositoryFactory.create_mentor_repository(db)
        self.student_repository = student_repository or RepositoryFactory.create_student_repository(
            db
        )
        self.conflict_checker = conflict_checker or ConflictChecker(db, repository=self.repository)
        self.clock = clock or SystemClock()

    # Creation

    @BaseService.measure_operation("create_session")
    def create_session(
        self,
        data: Union[SessionCreate, Mapping[str, Any]],
        *,
        actor_id: str,
    ) -> MentorSession:
        """
        Book a new session in ``pending`` status.

        Args:
            data: Session request (model or plain mapping)
            actor_id: Id of the student placing the booking

        Returns:
            The created session

        Raises:
            ValidationException: Malformed request, wrong duration, or start not in the future
            ForbiddenException: actor_id is not the booking student
            NotFoundException: Mentor or student does not exist
            SessionConflictException: Mentor already has an overlapping session
        """
        request = self.parse_request(SessionCreate, data)
        slot = request.slot

        if actor_id != request.student_id:
            raise ForbiddenException("Students can only book sessions for themselves")

        now = self.clock.now()
        starts_at = localize(self.clock, slot.session_date, slot.start_time)
        if starts_at <= now:
            raise ValidationException(
                "Cannot book sessions in the past",
                details={"session_start": starts_at.isoformat(), "now": now.isoformat()},
            )

        self.log_operation(
            "create_session",
            student_id=request.student_id,
            mentor_id=request.mentor_id,
            session_date=str(slot.session_date),
        )

        with self.transaction():
            mentor = self.mentor_repository.get_for_update(request.mentor_id)
            if not mentor:
                raise NotFoundException(f"Mentor {request.mentor_id} not found")
            if not self.student_repository.exists(id=request.student_id):
                raise NotFoundException(f"Student {request.student_id} not found")

            conflicts = self.conflict_checker.get_conflicting_sessions(
                request.mentor_id,
                slot.session_date,
                slot.start_time,
                slot.end_time,
                lock=True,
            )
            if conflicts:
                raise SessionConflictException(
                    details={
                        "mentor_id": request.mentor_id,
                        "session_date": str(slot.session_date),
                        "start_time": time_to_string(slot.start_time),
                        "end_time": time_to_string(slot.end_time),
                        "conflicts": conflicts,
                    }
                )

            session = self.repository.create(
                student_id=request.student_id,
                mentor_id=request.mentor_id,
                subject=slot.subject,
                education_level=slot.education_level.value,
                session_date=slot.session_date,
                start_time=slot.start_time,
                end_time=slot.end_time,
                duration_minutes=slot.duration_minutes,
                status=SessionStatus.PENDING.value,
                topic=request.topic,
                learning_objectives=request.learning_objectives,
                created_at=now,
                updated_at=now,
            )

        self.logger.info(
            f"Created session {session.id} for mentor {request.mentor_id} on "
            f"{slot.session_date} {time_to_string(slot.start_time)}"
        )
        return session

    # Lifecycle

    def _get_locked_session(self, session_id: str) -> MentorSession:
        session = self.repository.get_for_update(session_id)
        if not session:
            raise NotFoundException(f"Session {session_id} not found")
        return session

    @staticmethod
    def _require_participant(session: MentorSession, actor_id: str, action: str) -> None:
        if not session.involves(actor_id):
            raise ForbiddenException(f"You don't have permission to {action} this session")

    @staticmethod
    def _require_mentor(session: MentorSession, actor_id: str, action: str) -> None:
        if session.mentor_id != actor_id:
            raise ForbiddenException(f"Only the session's mentor can {action} it")

    @staticmethod
    def _require_student(session: MentorSession, actor_id: str, action: str) -> None:
        if session.student_id != actor_id:
            raise ForbiddenException(f"Only the session's student can {action} it")

    @BaseService.measure_operation("confirm_session")
    def confirm_session(
        self, session_id: str, payment_proof_url: str, *, actor_id: str
    ) -> MentorSession:
        """
        Attach payment proof and move a pending session to confirmed.

        Raises:
            ValidationException: Missing payment proof
            NotFoundException: Unknown session
            ForbiddenException: Caller is not a participant
            InvalidSessionTransitionException: Session is not pending
        """
        payload = self.parse_request(ConfirmPayload, {"payment_proof_url": payment_proof_url})

        with self.transaction():
            session = self._get_locked_session(session_id)
            self._require_participant(session, actor_id, "confirm")
            transition(session, SessionEvent.CONFIRM, payload, self.clock.now())

        self.log_operation("confirm_session", session_id=session_id, actor_id=actor_id)
        return session

    @BaseService.measure_operation("complete_session")
    def complete_session(self, session_id: str, *, actor_id: str) -> MentorSession:
        """Mark a confirmed session as completed (mentor only)."""
        with self.transaction():
            session = self._get_locked_session(session_id)
            self._require_mentor(session, actor_id, "complete")
            transition(session, SessionEvent.COMPLETE, None, self.clock.now())

        self.log_operation("complete_session", session_id=session_id, actor_id=actor_id)
        return session

    @BaseService.measure_operation("cancel_session")
    def cancel_session(
        self, session_id: str, *, actor_id: str, reason: Optional[str] = None
    ) -> MentorSession:
        """
        Cancel a pending or confirmed session.

        Either participant may cancel. The caller and reason are recorded and
        the mentor's slot becomes bookable again.

        Raises:
            NotFoundException: Unknown session
            ForbiddenException: Caller is not a participant
            InvalidSessionTransitionException: Session already completed, cancelled or no-show
        """
        payload = self.parse_request(CancelPayload, {"cancelled_by": actor_id, "reason": reason})

        with self.transaction():
            session = self._get_locked_session(session_id)
            self._require_participant(session, actor_id, "cancel")
            transition(session, SessionEvent.CANCEL, payload, self.clock.now())

        self.logger.info(f"Session {session_id} cancelled by {actor_id}")
        return session

    @BaseService.measure_operation("mark_no_show")
    def mark_no_show(self, session_id: str, *, actor_id: str) -> MentorSession:
        """Record that the student did not attend a confirmed session (mentor only)."""
        with self.transaction():
            session = self._get_locked_session(session_id)
            self._require_mentor(session, actor_id, "mark no-show on")
            transition(session, SessionEvent.MARK_NO_SHOW, None, self.clock.now())

        self.log_operation("mark_no_show", session_id=session_id, actor_id=actor_id)
        return session

    # Feedback

    @BaseService.measure_operation("add_student_feedback")
    def add_student_feedback(
        self,
        session_id: str,
        rating: int,
        text: Optional[str] = None,
        *,
        actor_id: str,
    ) -> MentorSession:
        """
        Record the student's rating of a completed session.

        The mentor's aggregate rating and session count are updated in the same
        transaction, with the mentor row locked for the read-modify-write.

        Raises:
            ValidationException: Rating outside 1-5 or text too long
            NotFoundException: Unknown session or mentor
            ForbiddenException: Caller is not the session's student
            InvalidSessionTransitionException: Not completed, or already rated
        """
        payload = self.parse_request(Feedback, {"rating": rating, "text": text})

        with self.transaction():
            session = self._get_locked_session(session_id)
            self._require_student(session, actor_id, "rate")
            transition(session, SessionEvent.STUDENT_FEEDBACK, payload, self.clock.now())

            mentor = self._get_locked_mentor(session.mentor_id)
            mentor.rating, mentor.total_sessions = running_average(
                mentor.rating or 0.0, mentor.total_sessions or 0, payload.rating
            )
            mentor.updated_at = self.clock.now()

        self.logger.info(
            f"Mentor {mentor.id} rated {payload.rating} on session {session_id}; "
            f"average now {mentor.rating:.2f} over {mentor.total_sessions} sessions"
        )
        return session

    @BaseService.measure_operation("add_mentor_feedback")
    def add_mentor_feedback(
        self,
        session_id: str,
        rating: int,
        text: Optional[str] = None,
        *,
        actor_id: str,
    ) -> MentorSession:
        """Record the mentor's rating of a completed session."""
        payload = self.parse_request(Feedback, {"rating": rating, "text": text})

        with self.transaction():
            session = self._get_locked_session(session_id)
            self._require_mentor(session, actor_id, "rate")
            transition(session, SessionEvent.MENTOR_FEEDBACK, payload, self.clock.now())

        self.log_operation("add_mentor_feedback", session_id=session_id, actor_id=actor_id)
        return session

    def _get_locked_mentor(self, mentor_id: str) -> MentorProfile:
        mentor = self.mentor_repository.get_for_update(mentor_id)
        if not mentor:
            raise NotFoundException(f"Mentor {mentor_id} not found")
        return mentor

    # Queries

    def get_session(self, session_id: str) -> MentorSession:
        session = self.repository.get_by_id(session_id)
        if not session:
            raise NotFoundException(f"Session {session_id} not found")
        return session

    def get_sessions_for_mentor_on_date(
        self, mentor_id: str, session_date: date
    ) -> List[MentorSession]:
        """All of a mentor's sessions on a date, any status, by start time."""
        return self.repository.get_sessions_for_mentor_on_date(mentor_id, session_date)

    @BaseService.measure_operation("get_upcoming_sessions")
    def get_upcoming_sessions(
        self, user_id: str, role: Union[UserRole, str]
    ) -> List[MentorSession]:
        """Pending and confirmed sessions from today on, soonest first."""
        return self.repository.get_upcoming_sessions(user_id, UserRole(role), today(self.clock))

    @BaseService.measure_operation("get_past_sessions")
    def get_past_sessions(self, user_id: str, role: Union[UserRole, str]) -> List[MentorSession]:
        """Sessions dated before today, newest first."""
        return self.repository.get_past_sessions(user_id, UserRole(role), today(self.clock))

    @BaseService.measure_operation("get_session_statistics")
    def get_session_statistics(
        self, user_id: str, role: Union[UserRole, str]
    ) -> SessionStatistics:
        """
        Count a user's sessions by status.

        Args:
            user_id: Student or mentor id
            role: Which side of the sessions the user is on

        Returns:
            SessionStatistics with a total and one count per status
        """
        sessions = self.repository.get_sessions_for_user(user_id, UserRole(role))
        counts = Counter(session.status for session in sessions)
        return SessionStatistics(
            total=len(sessions),
            **{status.value: counts.get(status.value, 0) for status in SessionStatus},
        )

    @staticmethod
    def _participant_filter(
        user_id: Optional[str], role: Union[UserRole, str, None]
    ) -> Tuple[Optional[str], Optional[UserRole]]:
        if user_id is None:
            return None, None
        if role is None:
            raise ValidationException(
                "A role is required when filtering by user", details={"user_id": user_id}
            )
        return user_id, UserRole(role)

    @BaseService.measure_operation("get_sessions_by_status")
    def get_sessions_by_status(
        self,
        status: Union[SessionStatus, str],
        *,
        user_id: Optional[str] = None,
        role: Union[UserRole, str, None] = None,
    ) -> List[MentorSession]:
        """
        Sessions in one status, earliest first, optionally for one participant.

        Raises:
            ValidationException: Unknown status, or user_id without a role
        """
        try:
            wanted = SessionStatus(status)
        except ValueError as exc:
            raise ValidationException(
                f"Unknown session status: {status}", details={"status": str(status)}
            ) from exc
        user_id, user_role = self._participant_filter(user_id, role)
        return self.repository.get_sessions_by_status(wanted, user_id, user_role)

    @BaseService.measure_operation("get_sessions_by_date_range")
    def get_sessions_by_date_range(
        self,
        start_date: date,
        end_date: date,
        *,
        user_id: Optional[str] = None,
        role: Union[UserRole, str, None] = None,
    ) -> List[MentorSession]:
        """
        Sessions dated from start_date through end_date inclusive.

        Raises:
            ValidationException: end_date before start_date, or user_id without a role
        """
        if end_date < start_date:
            raise ValidationException(
                "End date must not be before start date",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )
        user_id, user_role = self._participant_filter(user_id, role)
        return self.repository.get_sessions_by_date_range(start_date, end_date, user_id, user_role)

    def get_sessions_by_student_and_date(
        self, student_id: str, session_date: date
    ) -> List[MentorSession]:
        """All of a student's sessions on a date, any status, by start time."""
        return self.repository.get_sessions_by_student_and_date(student_id, session_date)

    @BaseService.measure_operation("get_session_with_details")
    def get_session_with_details(self, session_id: str) -> Dict[str, Any]:
        """
        Load a session together with both participants' profiles.

        Returns:
            The session's fields plus ``student`` and ``mentor`` profile dicts;
            a participant whose profile is gone is returned as None

        Raises:
            NotFoundException: Unknown session
        """
        session = self.get_session(session_id)
        student = self.student_repository.get_by_id(session.student_id)
        mentor = self.mentor_repository.get_by_id(session.mentor_id)
        if student is None or mentor is None:
            self.logger.warning(f"Session {session_id} references a missing participant profile")

        details = session.to_dict()
        details["student"] = student.to_dict() if student else None
        details["mentor"] = mentor.to_dict() if mentor else None
        return details
