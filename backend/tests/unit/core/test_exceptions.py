# backend/tests/unit/core/test_exceptions.py
from fastapi import HTTPException
import pytest

from eduvibe.core.exceptions import (
    BusinessRuleException,
    ConflictException,
    DomainException,
    ForbiddenException,
    InvalidSessionTransitionException,
    NotFoundException,
    ServiceException,
    SessionConflictException,
    ValidationException,
)


@pytest.mark.parametrize(
    "exc_class, status_code",
    [
        (ValidationException, 400),
        (ForbiddenException, 403),
        (NotFoundException, 404),
        (ConflictException, 409),
        (BusinessRuleException, 422),
        (ServiceException, 500),
    ],
)
def test_http_status_mapping(exc_class, status_code):
    http_exc = exc_class("boom").to_http_exception()

    assert isinstance(http_exc, HTTPException)
    assert http_exc.status_code == status_code
    assert http_exc.detail["message"] == "boom"


def test_code_defaults_to_class_name():
    exc = NotFoundException("Session not found")

    assert exc.code == "NotFoundException"
    assert exc.details == {}
    assert str(exc) == "Session not found"


def test_session_conflict_defaults():
    exc = SessionConflictException(details={"mentor_id": "m"})

    assert isinstance(exc, ConflictException)
    assert exc.message == "Mentor is not available at the selected time"
    assert exc.code == "SESSION_CONFLICT"
    assert exc.to_http_exception().detail["details"] == {"mentor_id": "m"}


def test_invalid_transition_details():
    exc = InvalidSessionTransitionException(
        "Session must be confirmed before completion",
        current_status="pending",
        event="complete",
    )

    assert isinstance(exc, DomainException)
    assert exc.details == {"current_status": "pending", "event": "complete"}


def test_service_exception_fallback_message():
    detail = ServiceException("").to_http_exception().detail

    assert detail["message"] == "An error occurred processing your request"
