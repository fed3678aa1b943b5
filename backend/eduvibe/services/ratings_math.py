# backend/eduvibe/services/ratings_math.py
"""
Mentor rating aggregate math.

Kept free of I/O so the feedback transaction can call it on a locked row.
"""

from typing import Tuple

from ..core.constants import MAX_FEEDBACK_RATING, MIN_FEEDBACK_RATING


def running_average(old_average: float, old_count: int, new_rating: int) -> Tuple[float, int]:
    """
    Fold one new rating into an aggregate.

    Args:
        old_average: Current average (0.0 when there are no ratings)
        old_count: Number of ratings behind ``old_average``
        new_rating: Rating being added, 1-5

    Returns:
        (new_average, new_count)
    """
    if old_count < 0:
        raise ValueError(f"Rating count must not be negative, got {old_count}")
    if not MIN_FEEDBACK_RATING <= new_rating <= MAX_FEEDBACK_RATING:
        raise ValueError(f"Rating must be between 1 and 5, got {new_rating}")

    new_count = old_count + 1
    new_average = (float(old_average) * old_count + new_rating) / new_count
    return new_average, new_count
