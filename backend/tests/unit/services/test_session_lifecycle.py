# backend/tests/unit/services/test_session_lifecycle.py
"""Unit tests for the session lifecycle state machine."""

from datetime import datetime

import pytest
import pytz

from eduvibe.core.enums import PaymentStatus, SessionEvent, SessionStatus
from eduvibe.core.exceptions import (
    BusinessRuleException,
    InvalidSessionTransitionException,
    ValidationException,
)
from eduvibe.models.session import MentorSession
from eduvibe.schemas.session import CancelPayload, ConfirmPayload, Feedback
from eduvibe.services.session_lifecycle import transition

NOW = pytz.timezone("Asia/Colombo").localize(datetime(2025, 6, 2, 8, 0))


def _session(status: SessionStatus = SessionStatus.PENDING) -> MentorSession:
    return MentorSession(
        id="01J00000000000000000000000",
        student_id="student-1",
        mentor_id="mentor-1",
        status=status.value,
    )


class TestConfirm:
    def test_confirm_pending_session(self):
        session = _session()

        transition(
            session, SessionEvent.CONFIRM, ConfirmPayload(payment_proof_url="https://x/p.png"), NOW
        )

        assert session.status == SessionStatus.CONFIRMED.value
        assert session.payment_status == PaymentStatus.CONFIRMED.value
        assert session.payment_proof_url == "https://x/p.png"
        assert session.confirmed_at == NOW
        assert session.updated_at == NOW

    def test_confirm_requires_payment_proof(self):
        session = _session()

        with pytest.raises(ValidationException):
            transition(session, SessionEvent.CONFIRM, None, NOW)

        assert session.status == SessionStatus.PENDING.value

    def test_confirm_twice_rejected(self):
        session = _session(SessionStatus.CONFIRMED)

        with pytest.raises(InvalidSessionTransitionException, match="not in pending status"):
            transition(session, "confirm", ConfirmPayload(payment_proof_url="u"), NOW)

    def test_completed_back_to_confirmed_rejected(self):
        session = _session(SessionStatus.COMPLETED)

        with pytest.raises(InvalidSessionTransitionException) as exc_info:
            transition(session, SessionEvent.CONFIRM, ConfirmPayload(payment_proof_url="u"), NOW)

        assert exc_info.value.details == {"current_status": "completed", "event": "confirm"}
        assert session.status == SessionStatus.COMPLETED.value


class TestComplete:
    def test_complete_confirmed_session(self):
        session = _session(SessionStatus.CONFIRMED)

        transition(session, SessionEvent.COMPLETE, now=NOW)

        assert session.status == SessionStatus.COMPLETED.value
        assert session.completed_at == NOW

    def test_complete_pending_rejected(self):
        with pytest.raises(
            InvalidSessionTransitionException, match="must be confirmed before completion"
        ):
            transition(_session(), SessionEvent.COMPLETE, now=NOW)


class TestCancel:
    @pytest.mark.parametrize("status", [SessionStatus.PENDING, SessionStatus.CONFIRMED])
    def test_cancel_open_session(self, status):
        session = _session(status)

        transition(
            session,
            SessionEvent.CANCEL,
            CancelPayload(cancelled_by="student-1", reason="Exam moved"),
            NOW,
        )

        assert session.status == SessionStatus.CANCELLED.value
        assert session.cancelled_at == NOW
        assert session.cancelled_by_id == "student-1"
        assert session.cancellation_reason == "Exam moved"

    @pytest.mark.parametrize(
        "status, message",
        [
            (SessionStatus.COMPLETED, "Cannot cancel a completed session"),
            (SessionStatus.CANCELLED, "already cancelled"),
            (SessionStatus.NO_SHOW, "no-show"),
        ],
    )
    def test_cancel_closed_session_rejected(self, status, message):
        with pytest.raises(InvalidSessionTransitionException, match=message):
            transition(
                _session(status), SessionEvent.CANCEL, CancelPayload(cancelled_by="x"), NOW
            )

    def test_cancel_requires_actor(self):
        with pytest.raises(ValidationException):
            transition(_session(), SessionEvent.CANCEL, None, NOW)


class TestNoShow:
    def test_mark_confirmed_session_no_show(self):
        session = _session(SessionStatus.CONFIRMED)

        transition(session, SessionEvent.MARK_NO_SHOW, now=NOW)

        assert session.status == SessionStatus.NO_SHOW.value

    def test_pending_session_cannot_be_no_show(self):
        with pytest.raises(InvalidSessionTransitionException, match="no-show"):
            transition(_session(), SessionEvent.MARK_NO_SHOW, now=NOW)


class TestFeedback:
    def test_student_feedback_on_completed_session(self):
        session = _session(SessionStatus.COMPLETED)

        transition(session, SessionEvent.STUDENT_FEEDBACK, Feedback(rating=4, text="Great"), NOW)

        assert session.student_rating == 4
        assert session.student_feedback == "Great"
        assert session.status == SessionStatus.COMPLETED.value

    def test_mentor_feedback_is_independent(self):
        session = _session(SessionStatus.COMPLETED)

        transition(session, SessionEvent.STUDENT_FEEDBACK, Feedback(rating=5), NOW)
        transition(session, SessionEvent.MENTOR_FEEDBACK, Feedback(rating=3, text="Late"), NOW)

        assert session.student_rating == 5
        assert session.mentor_rating == 3
        assert session.mentor_feedback == "Late"

    def test_feedback_on_pending_session_rejected(self):
        with pytest.raises(
            InvalidSessionTransitionException, match="must be completed before feedback"
        ):
            transition(_session(), SessionEvent.STUDENT_FEEDBACK, Feedback(rating=4), NOW)

    def test_duplicate_feedback_rejected(self):
        session = _session(SessionStatus.COMPLETED)
        transition(session, SessionEvent.MENTOR_FEEDBACK, Feedback(rating=4), NOW)

        with pytest.raises(InvalidSessionTransitionException, match="already been submitted"):
            transition(session, SessionEvent.MENTOR_FEEDBACK, Feedback(rating=2), NOW)

        assert session.mentor_rating == 4


def test_state_errors_are_business_rule_violations():
    exc = InvalidSessionTransitionException("nope", current_status="pending", event="complete")

    assert isinstance(exc, BusinessRuleException)
    assert exc.to_http_exception().status_code == 422
    assert exc.code == "INVALID_SESSION_TRANSITION"


def test_unknown_event_rejected():
    with pytest.raises(ValueError):
        transition(_session(), "reopen", None, NOW)
