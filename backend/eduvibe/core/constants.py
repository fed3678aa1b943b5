"""Application-wide constants for the EduVibe scheduling core."""

from __future__ import annotations

# Sessions are fixed two-hour blocks
SESSION_DURATION_MINUTES = 120
MINUTES_PER_DAY = 24 * 60

# Bookable two-hour blocks offered by the booking form
SESSION_SLOTS = (
    "09:00 - 11:00",
    "11:00 - 13:00",
    "14:00 - 16:00",
    "16:00 - 18:00",
    "18:00 - 20:00",
)

# Feedback constraints
MIN_FEEDBACK_RATING = 1
MAX_FEEDBACK_RATING = 5
MAX_FEEDBACK_LENGTH = 500
MAX_REASON_LENGTH = 255

# Mentor aggregate rating domain
MIN_MENTOR_RATING = 0.0
MAX_MENTOR_RATING = 5.0
