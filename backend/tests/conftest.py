# backend/tests/conftest.py
"""
Pytest configuration for the EduVibe scheduling core.

Every test gets its own in-memory SQLite database, so tests never share rows
and never need cleanup. Row locks are skipped on SQLite; the locking path is
covered by the dialect checks in session_utils.
"""

import os

# Set testing mode BEFORE any eduvibe imports
os.environ["is_testing"] = "true"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date, datetime, time
from typing import Any, Callable, Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from eduvibe.core.enums import MentorEducationLevel, SessionStatus, StudentEducationLevel
from eduvibe.database import Base
import eduvibe.models  # noqa: F401
from eduvibe.models.mentor import MentorProfile
from eduvibe.models.session import MentorSession
from eduvibe.models.student import StudentProfile
from eduvibe.services.base import BaseService
from tests.helpers.clock import FrozenClock

# Monday 2 June 2025, 08:00 in Colombo
FROZEN_NOW = datetime(2025, 6, 2, 8, 0)
TOMORROW = date(2025, 6, 3)


@pytest.fixture
def db() -> Iterator[Session]:
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(FROZEN_NOW)


@pytest.fixture(autouse=True)
def _reset_service_metrics():
    BaseService._class_metrics.clear()
    yield
    BaseService._class_metrics.clear()


@pytest.fixture
def make_mentor(db: Session) -> Callable[..., MentorProfile]:
    def _make(**overrides: Any) -> MentorProfile:
        fields = {
            "full_name": "Nimal Perera",
            "teaching_subjects": ["Mathematics"],
            "preferred_student_levels": [MentorEducationLevel.GRADE_10_11.value],
            "languages": ["english"],
            "is_approved": True,
            "is_verified": True,
            "rating": 0.0,
            "total_sessions": 0,
        }
        fields.update(overrides)
        mentor = MentorProfile(**fields)
        db.add(mentor)
        db.commit()
        return mentor

    return _make


@pytest.fixture
def make_student(db: Session) -> Callable[..., StudentProfile]:
    def _make(**overrides: Any) -> StudentProfile:
        fields = {
            "full_name": "Kavindi Silva",
            "current_education_level": StudentEducationLevel.ORDINARY_LEVEL.value,
            "subjects_of_interest": "Mathematics, Physics",
            "languages": ["english"],
        }
        fields.update(overrides)
        student = StudentProfile(**fields)
        db.add(student)
        db.commit()
        return student

    return _make


@pytest.fixture
def make_session(db: Session) -> Callable[..., MentorSession]:
    """Insert a session row directly, bypassing the service guards."""

    def _make(mentor: MentorProfile, student: StudentProfile, **overrides: Any) -> MentorSession:
        fields = {
            "student_id": student.id,
            "mentor_id": mentor.id,
            "subject": "Mathematics",
            "education_level": StudentEducationLevel.ORDINARY_LEVEL.value,
            "session_date": TOMORROW,
            "start_time": time(9, 0),
            "end_time": time(11, 0),
            "status": SessionStatus.PENDING.value,
        }
        fields.update(overrides)
        session = MentorSession(**fields)
        db.add(session)
        db.commit()
        return session

    return _make


@pytest.fixture
def mentor(make_mentor) -> MentorProfile:
    return make_mentor()


@pytest.fixture
def student(make_student) -> StudentProfile:
    return make_student()
