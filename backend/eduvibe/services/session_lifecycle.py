# backend/eduvibe/services/session_lifecycle.py
"""
Session lifecycle state machine.

    pending --confirm--> confirmed --complete--> completed --feedback--> completed
       |                     |
       +------cancel---------+--> cancelled
                             +--mark_no_show--> no_show

``transition`` validates one event against the session's current status and
applies it to the session object it is given. It performs no I/O and reads
no clock; the caller supplies ``now`` and persists the result.

Mentor rating aggregates are not touched here. Student feedback changes the
mentor row, which belongs to the caller's transaction.
"""

from datetime import datetime
import logging
from typing import Any, Callable, Dict, Optional, Union

from ..core.enums import PaymentStatus, SessionEvent, SessionStatus
from ..core.exceptions import InvalidSessionTransitionException, ValidationException
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..schemas.session import CancelPayload, ConfirmPayload, Feedback

logger = logging.getLogger(__name__)

Payload = Union[ConfirmPayload, CancelPayload, Feedback, None]


def _reject(session: Any, event: SessionEvent, message: str) -> InvalidSessionTransitionException:
    return InvalidSessionTransitionException(
        message, current_status=session.status, event=event.value
    )


def _require(payload: Payload, expected: type, event: SessionEvent) -> Any:
    if not isinstance(payload, expected):
        raise ValidationException(
            f"{event.value} requires a {expected.__name__} payload",
            code="INVALID_REQUEST",
            details={"event": event.value},
        )
    return payload


def _confirm(session: Any, payload: Payload, now: datetime) -> None:
    data = _require(payload, ConfirmPayload, SessionEvent.CONFIRM)
    if session.status != SessionStatus.PENDING.value:
        raise _reject(session, SessionEvent.CONFIRM, "Session is not in pending status")

    session.status = SessionStatus.CONFIRMED.value
    session.payment_status = PaymentStatus.CONFIRMED.value
    session.payment_proof_url = data.payment_proof_url
    session.confirmed_at = now


def _complete(session: Any, payload: Payload, now: datetime) -> None:
    if session.status != SessionStatus.CONFIRMED.value:
        raise _reject(
            session, SessionEvent.COMPLETE, "Session must be confirmed before completion"
        )

    session.status = SessionStatus.COMPLETED.value
    session.completed_at = now


_CANCEL_REJECTIONS = {
    SessionStatus.COMPLETED.value: "Cannot cancel a completed session",
    SessionStatus.CANCELLED.value: "Session is already cancelled",
    SessionStatus.NO_SHOW.value: "Cannot cancel a session marked as no-show",
}


def _cancel(session: Any, payload: Payload, now: datetime) -> None:
    data = _require(payload, CancelPayload, SessionEvent.CANCEL)
    if session.status in _CANCEL_REJECTIONS:
        raise _reject(session, SessionEvent.CANCEL, _CANCEL_REJECTIONS[session.status])

    session.status = SessionStatus.CANCELLED.value
    session.cancelled_at = now
    session.cancelled_by_id = data.cancelled_by
    session.cancellation_reason = data.reason


def _mark_no_show(session: Any, payload: Payload, now: datetime) -> None:
    if session.status != SessionStatus.CONFIRMED.value:
        raise _reject(
            session, SessionEvent.MARK_NO_SHOW, "Session must be confirmed to mark as no-show"
        )

    session.status = SessionStatus.NO_SHOW.value


def _feedback(author: str) -> Callable[[Any, Payload, datetime], None]:
    event = SessionEvent.STUDENT_FEEDBACK if author == "student" else SessionEvent.MENTOR_FEEDBACK
    rating_attr = f"{author}_rating"
    text_attr = f"{author}_feedback"

    def apply(session: Any, payload: Payload, now: datetime) -> None:
        data = _require(payload, Feedback, event)
        if session.status != SessionStatus.COMPLETED.value:
            raise _reject(session, event, "Session must be completed before feedback")
        if getattr(session, rating_attr) is not None:
            raise _reject(
                session, event, f"{author.capitalize()} feedback has already been submitted"
            )

        setattr(session, rating_attr, data.rating)
        setattr(session, text_attr, data.text)

    return apply


_HANDLERS: Dict[SessionEvent, Callable[[Any, Payload, datetime], None]] = {
    SessionEvent.CONFIRM: _confirm,
    SessionEvent.COMPLETE: _complete,
    SessionEvent.CANCEL: _cancel,
    SessionEvent.MARK_NO_SHOW: _mark_no_show,
    SessionEvent.STUDENT_FEEDBACK: _feedback("student"),
    SessionEvent.MENTOR_FEEDBACK: _feedback("mentor"),
}


def transition(
    session: Any,
    event: Union[SessionEvent, str],
    payload: Payload = None,
    now: Optional[datetime] = None,
) -> Any:
    """
    Apply a lifecycle event to a session.

    Args:
        session: Session row (or any object with the same attributes)
        event: Event to apply
        payload: ConfirmPayload, CancelPayload or Feedback, depending on event
        now: Timestamp recorded for confirm, complete and cancel

    Returns:
        The same session, updated

    Raises:
        InvalidSessionTransitionException: Event not legal from current status
        ValidationException: Missing or wrong payload
    """
    event = SessionEvent(event)
    previous = session.status
    try:
        _HANDLERS[event](session, payload, now)
    except InvalidSessionTransitionException:
        prometheus_metrics.record_session_transition(event.value, "rejected")
        raise

    if now is not None:
        session.updated_at = now
    prometheus_metrics.record_session_transition(event.value, "success")
    logger.debug(f"Session {session.id}: {event.value} ({previous} -> {session.status})")
    return session
