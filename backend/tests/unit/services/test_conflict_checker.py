# backend/tests/unit/services/test_conflict_checker.py
"""
Unit tests for mentor conflict detection.

The pure predicates run against unsaved MentorSession rows; ConflictChecker
runs against the in-memory database.
"""

from datetime import date, time

import pytest

from eduvibe.core.enums import SessionStatus
from eduvibe.core.exceptions import ValidationException
from eduvibe.models.session import MentorSession
from eduvibe.services.conflict_checker import (
    ConflictChecker,
    derive_end_time,
    find_conflicts,
    intervals_overlap,
    is_available,
)

DAY = date(2025, 6, 3)


def _existing(start: time, end: time, status: str = "confirmed", **overrides) -> MentorSession:
    fields = {
        "id": f"s-{start.hour}-{status}",
        "mentor_id": "mentor-1",
        "session_date": DAY,
        "start_time": start,
        "end_time": end,
        "status": status,
    }
    fields.update(overrides)
    return MentorSession(**fields)


class TestDeriveEndTime:
    def test_adds_duration(self):
        assert derive_end_time(time(9, 0), 120) == time(11, 0)

    def test_wraps_past_midnight(self):
        assert derive_end_time(time(23, 0), 120) == time(1, 0)

    def test_zero_duration(self):
        assert derive_end_time(time(14, 30), 0) == time(14, 30)

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationException):
            derive_end_time(time(9, 0), -30)


class TestIntervalsOverlap:
    def test_back_to_back_does_not_overlap(self):
        assert not intervals_overlap(time(11, 0), time(13, 0), time(9, 0), time(11, 0))
        assert not intervals_overlap(time(9, 0), time(11, 0), time(11, 0), time(13, 0))

    def test_partial_overlap(self):
        assert intervals_overlap(time(10, 0), time(12, 0), time(9, 0), time(11, 0))

    def test_containment(self):
        assert intervals_overlap(time(9, 30), time(10, 30), time(9, 0), time(11, 0))

    def test_identical(self):
        assert intervals_overlap(time(9, 0), time(11, 0), time(9, 0), time(11, 0))


class TestIsAvailable:
    def test_free_day(self):
        assert is_available("mentor-1", DAY, time(9, 0), time(11, 0), [])

    def test_overlapping_confirmed_session_blocks(self):
        existing = [_existing(time(10, 0), time(12, 0))]

        assert not is_available("mentor-1", DAY, time(9, 0), time(11, 0), existing)

    def test_back_to_back_is_available(self):
        existing = [_existing(time(9, 0), time(11, 0))]

        assert is_available("mentor-1", DAY, time(11, 0), time(13, 0), existing)

    @pytest.mark.parametrize("status", ["pending", "confirmed", "completed"])
    def test_occupying_statuses_block(self, status):
        existing = [_existing(time(9, 0), time(11, 0), status=status)]

        assert not is_available("mentor-1", DAY, time(9, 0), time(11, 0), existing)

    @pytest.mark.parametrize("status", ["cancelled", "no_show"])
    def test_cancelled_and_no_show_do_not_block(self, status):
        existing = [_existing(time(9, 0), time(11, 0), status=status)]

        assert is_available("mentor-1", DAY, time(9, 0), time(11, 0), existing)

    def test_other_mentor_and_other_date_ignored(self):
        existing = [
            _existing(time(9, 0), time(11, 0), mentor_id="mentor-2"),
            _existing(time(9, 0), time(11, 0), session_date=date(2025, 6, 4)),
        ]

        assert is_available("mentor-1", DAY, time(9, 0), time(11, 0), existing)

    def test_excluded_session_ignored(self):
        existing = [_existing(time(9, 0), time(11, 0), id="keep-me")]

        assert find_conflicts(
            "mentor-1", DAY, time(9, 0), time(11, 0), existing, exclude_session_id="keep-me"
        ) == []


class TestConflictCheckerService:
    def test_get_conflicting_sessions_returns_details(
        self, db, mentor, student, make_session, caplog
    ):
        booked = make_session(mentor, student, start_time=time(9, 0), end_time=time(11, 0))
        checker = ConflictChecker(db)

        conflicts = checker.get_conflicting_sessions(
            mentor.id, booked.session_date, time(10, 0), time(12, 0)
        )

        assert len(conflicts) == 1
        assert conflicts[0]["session_id"] == booked.id
        assert conflicts[0]["start_time"] == "09:00"
        assert conflicts[0]["end_time"] == "11:00"
        assert conflicts[0]["status"] == SessionStatus.PENDING.value
        assert "session conflicts" in caplog.text

    def test_check_availability_reads_repository(self, db, mentor, student, make_session):
        booked = make_session(mentor, student, start_time=time(13, 0), end_time=time(15, 0))
        checker = ConflictChecker(db)

        assert not checker.check_availability(
            mentor.id, booked.session_date, time(13, 0), time(15, 0)
        )
        assert checker.check_availability(
            mentor.id, booked.session_date, time(15, 0), time(17, 0)
        )

    def test_cancelled_session_frees_slot(self, db, mentor, student, make_session):
        booked = make_session(mentor, student, status=SessionStatus.CANCELLED.value)
        checker = ConflictChecker(db)

        assert checker.check_availability(
            mentor.id, booked.session_date, booked.start_time, booked.end_time
        )

    def test_get_booked_times_for_date_skips_non_blocking(
        self, db, mentor, student, make_session
    ):
        day = date(2025, 6, 3)
        make_session(mentor, student, start_time=time(13, 0), end_time=time(15, 0))
        make_session(mentor, student, start_time=time(9, 0), end_time=time(11, 0))
        make_session(
            mentor,
            student,
            start_time=time(11, 0),
            end_time=time(13, 0),
            status=SessionStatus.NO_SHOW.value,
        )
        checker = ConflictChecker(db)

        booked = checker.get_booked_times_for_date(mentor.id, day)

        assert [(b["start_time"], b["end_time"]) for b in booked] == [
            ("09:00", "11:00"),
            ("13:00", "15:00"),
        ]
