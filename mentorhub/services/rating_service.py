# mentorhub/services/rating_service.py
"""
Rating Service Layer
Rating submission on completed bookings and full-rescan aggregation of
mentor and mentee averages.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from mentorhub.crud import booking as booking_crud
from mentorhub.crud import user as user_crud
from mentorhub.errors import BadRequestError, ForbiddenError
from mentorhub.services.booking_service import get_booking

logger = logging.getLogger(__name__)


def average_rating(ratings: Iterable[int]) -> float:
    """Mean rounded half-up to one decimal; 0 for no ratings."""
    values = [r for r in ratings if r is not None and r >= 1]
    if not values:
        return 0.0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


# ======================
# AGGREGATION
# ======================

def update_mentor_rating(db: Session, mentor_id: int) -> Dict[str, Any]:
    ratings = booking_crud.list_mentor_ratings(db, mentor_id)
    profile = user_crud.get_or_create_mentor_profile(db, mentor_id)
    profile.average_rating = average_rating(ratings)
    profile.total_reviews = len(ratings)
    return {"average_rating": profile.average_rating, "total_reviews": profile.total_reviews}


def update_mentee_rating(db: Session, mentee_id: int) -> float:
    ratings = booking_crud.list_mentee_ratings(db, mentee_id)
    profile = user_crud.get_or_create_mentee_profile(db, mentee_id)
    profile.average_rating = average_rating(ratings)
    return profile.average_rating


def recompute_ratings(db: Session, mentor_id: int, mentee_id: int) -> Optional[Dict[str, Any]]:
    """
    Recompute both averages from scratch and commit.

    Best-effort: on failure the error is logged, the session rolled back
    and None returned.
    """
    try:
        mentor_stats = update_mentor_rating(db, mentor_id)
        update_mentee_rating(db, mentee_id)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to recompute ratings for mentor %s / mentee %s", mentor_id, mentee_id)
        return None
    return mentor_stats


# ======================
# SUBMISSION
# ======================

RATING_MESSAGE = "Rating must be a whole number between 1 and 5"


def coerce_rating(value: Any) -> Optional[int]:
    """The rating as an int in 1..5, or None when it is missing, fractional or out of range."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or not 1 <= value <= 5:
        return None
    return value


def submit_rating(
    db: Session,
    booking_id: int,
    user_id: Optional[int],
    rating: Any,
    review: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Rate a completed booking.

    A resubmission overwrites the previous rating and review; the
    aggregates are always rebuilt from all rated bookings.

    Args:
        db: Database session
        booking_id: Booking identifier
        user_id: Caller, must be the booking's mentee
        rating: 1-5
        review: Optional free text

    Returns:
        Dictionary with the booking and the mentor's refreshed aggregates

    Raises:
        NotFoundError: If the booking does not exist
        BadRequestError: Rating out of range, missing user, or booking not completed
        ForbiddenError: If the caller does not own the booking
    """
    booking = get_booking(db, booking_id)

    rating = coerce_rating(rating)
    if rating is None:
        raise BadRequestError(RATING_MESSAGE)
    if user_id is None:
        raise BadRequestError("User ID is required")
    if booking.user_id != user_id:
        raise ForbiddenError("You can only rate your own sessions")
    if booking.status != "completed":
        raise BadRequestError("Can only rate completed sessions")

    booking.rating = rating
    booking.review = review or ""
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s rated %s by user %s", booking.id, rating, user_id)

    mentor_stats = recompute_ratings(db, booking.mentor_id, booking.user_id) or {}
    return {
        "message": "Rating submitted successfully",
        "booking": booking,
        "mentor_average_rating": mentor_stats.get("average_rating"),
        "mentor_total_reviews": mentor_stats.get("total_reviews"),
    }
