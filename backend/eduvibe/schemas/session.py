# backend/eduvibe/schemas/session.py
"""Request and response schemas for mentor sessions."""

from datetime import date, time
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from ..core.constants import (
    MAX_FEEDBACK_LENGTH,
    MAX_FEEDBACK_RATING,
    MAX_REASON_LENGTH,
    MIN_FEEDBACK_RATING,
    SESSION_DURATION_MINUTES,
)
from ..core.enums import StudentEducationLevel
from ..utils.time_utils import add_minutes, parse_slot_label, time_to_string
from ._strict_base import FrozenModel, StrictRequestModel


class SessionSlot(StrictRequestModel):
    """
    A requested two-hour block on one calendar date.

    ``end_time`` may be omitted and is then derived from ``start_time`` and
    the duration. Durations other than the fixed block are rejected, never
    corrected.
    """

    subject: str = Field(..., min_length=1, max_length=255)
    education_level: StudentEducationLevel
    session_date: date
    start_time: time
    end_time: Optional[time] = None
    duration_minutes: int = SESSION_DURATION_MINUTES

    @model_validator(mode="after")
    def _validate_block(self) -> "SessionSlot":
        for label, value in (("Start", self.start_time), ("End", self.end_time)):
            if value is not None and (value.second or value.microsecond):
                raise ValueError(f"{label} time must be a whole minute (HH:MM), got {value}")

        if self.duration_minutes != SESSION_DURATION_MINUTES:
            raise ValueError(
                f"Session duration must be exactly {SESSION_DURATION_MINUTES // 60} hours "
                f"({SESSION_DURATION_MINUTES} minutes)"
            )

        derived_end = add_minutes(self.start_time, self.duration_minutes)
        if derived_end <= self.start_time:
            raise ValueError("Sessions must start and end on the same calendar day")

        if self.end_time is None:
            self.end_time = derived_end
        elif self.end_time != derived_end:
            raise ValueError(
                f"End time {time_to_string(self.end_time)} does not match "
                f"start time plus {self.duration_minutes} minutes "
                f"({time_to_string(derived_end)})"
            )
        return self

    @classmethod
    def from_label(
        cls,
        label: str,
        *,
        subject: str,
        education_level: StudentEducationLevel,
        session_date: date,
    ) -> "SessionSlot":
        """Build a slot from a booking-form label such as ``"09:00 - 11:00"``."""
        start, end = parse_slot_label(label)
        return cls(
            subject=subject,
            education_level=education_level,
            session_date=session_date,
            start_time=start,
            end_time=end,
        )


class SessionCreate(StrictRequestModel):
    """Payload for booking a new session."""

    student_id: str = Field(..., min_length=1)
    mentor_id: str = Field(..., min_length=1)
    slot: SessionSlot
    topic: Optional[str] = Field(default=None, max_length=255)
    learning_objectives: Optional[List[str]] = None


class ConfirmPayload(StrictRequestModel):
    payment_proof_url: str = Field(..., min_length=1)


class CancelPayload(StrictRequestModel):
    cancelled_by: str = Field(..., min_length=1)
    reason: Optional[str] = Field(default=None, max_length=MAX_REASON_LENGTH)


class Feedback(StrictRequestModel):
    """Rating plus optional comment left after a completed session."""

    rating: int = Field(..., ge=MIN_FEEDBACK_RATING, le=MAX_FEEDBACK_RATING)
    text: Optional[str] = Field(default=None, max_length=MAX_FEEDBACK_LENGTH)

    @field_validator("rating", mode="before")
    @classmethod
    def _reject_bool(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("Rating must be an integer between 1 and 5")
        return value


class SessionStatistics(FrozenModel):
    """Per-user session counts grouped by status."""

    total: int = 0
    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0
    no_show: int = 0
