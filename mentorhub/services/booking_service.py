# mentorhub/services/booking_service.py
"""
Booking Service Layer
Booking lifecycle: creation, status transitions and the one-time
completion side effect on mentor and mentee profiles.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from mentorhub.crud import booking as booking_crud
from mentorhub.crud import user as user_crud
from mentorhub.errors import BadRequestError, NotFoundError
from mentorhub.models.booking import BOOKING_STATUSES, Booking
from mentorhub.utils.duration import parse_duration_hours

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = (
    "user_id",
    "mentor_id",
    "mentor_name",
    "session_type",
    "duration",
    "date",
    "time",
)

# Never writable through the generic update path
IMMUTABLE_FIELDS = {"id", "created_at", "updated_at", "rating", "review", "user_id", "mentor_id"}

INVALID_STATUS_MESSAGE = "Invalid status. Must be one of: " + ", ".join(BOOKING_STATUSES)

# Columns a partial update may change but never clear
NOT_NULL_FIELDS = ("mentor_name", "session_type", "duration", "date", "time", "cost")


# ======================
# LOOKUPS
# ======================

def get_booking(db: Session, booking_id: int) -> Booking:
    booking = booking_crud.get_booking(db, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def list_bookings(db: Session) -> List[Booking]:
    return booking_crud.list_bookings(db)


def list_user_bookings(db: Session, user_id: int) -> List[Booking]:
    return booking_crud.list_bookings_for_user(db, user_id)


def list_mentor_bookings(db: Session, mentor_id: int) -> List[Booking]:
    return booking_crud.list_bookings_for_mentor(db, mentor_id)


def list_bookings_in_range(
    db: Session,
    start_date: Optional[date],
    end_date: Optional[date],
) -> List[Booking]:
    if not start_date or not end_date:
        raise BadRequestError("Start date and end date are required")
    return booking_crud.list_bookings_between(db, start_date, end_date)


# ======================
# CREATE / UPDATE / DELETE
# ======================

def create_booking(db: Session, data: Dict[str, Any]) -> Booking:
    """
    Create a pending booking for a mentee with a mentor.

    Args:
        db: Database session
        data: Booking fields (snake_case keys)

    Returns:
        The persisted booking

    Raises:
        BadRequestError: If a required field is missing
        NotFoundError: If the mentee or mentor does not exist
    """
    missing = [field for field in REQUIRED_CREATE_FIELDS if not data.get(field)]
    if missing:
        raise BadRequestError("Missing required fields: " + ", ".join(missing))

    if not user_crud.get_user(db, data["user_id"]):
        raise NotFoundError("User not found")
    if not user_crud.get_user(db, data["mentor_id"]):
        raise NotFoundError("Mentor not found")

    booking = Booking(
        user_id=data["user_id"],
        mentor_id=data["mentor_id"],
        mentor_name=data["mentor_name"],
        session_type=data["session_type"],
        duration=data["duration"],
        date=data["date"],
        time=data["time"],
        notes=data.get("notes") or "",
        cost=data.get("cost") or 0,
        topics=data.get("topics") or [],
        status="pending",
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s created: mentee=%s mentor=%s", booking.id, booking.user_id, booking.mentor_id)
    return booking


def update_booking(db: Session, booking_id: int, changes: Dict[str, Any]) -> Tuple[Booking, Optional[str]]:
    """
    Apply a partial update.

    A ``status`` key goes through the same validation and completion logic
    as :func:`update_status`.

    Returns:
        (booking, previous_status); previous_status is None when the
        status was not touched.
    """
    booking = get_booking(db, booking_id)
    changes = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}
    new_status = changes.pop("status", None)
    if new_status is not None and not is_valid_status(new_status):
        raise BadRequestError(INVALID_STATUS_MESSAGE)
    cleared = [field for field in NOT_NULL_FIELDS if field in changes and changes[field] is None]
    if cleared:
        raise BadRequestError(f"{cleared[0]} cannot be empty")
    if changes.get("topics", []) is None:
        changes["topics"] = []

    for field, value in changes.items():
        setattr(booking, field, value)

    previous_status = None
    if new_status is not None:
        previous_status = booking.status
        booking.status = new_status

    db.commit()
    db.refresh(booking)

    if previous_status is not None:
        record_completion(db, booking, previous_status)
    return booking, previous_status


def delete_booking(db: Session, booking_id: int) -> None:
    booking = get_booking(db, booking_id)
    db.delete(booking)
    db.commit()
    logger.info("Booking %s deleted", booking_id)


# ======================
# STATUS TRANSITIONS
# ======================

def is_valid_status(status: Any) -> bool:
    return isinstance(status, str) and status in BOOKING_STATUSES


def update_status(db: Session, booking_id: int, status: Any) -> Tuple[Booking, str]:
    """
    Move a booking to a new status.

    The status is validated before anything is read or written, so an
    invalid value leaves the booking untouched.

    Args:
        db: Database session
        booking_id: Booking identifier
        status: One of BOOKING_STATUSES

    Returns:
        (booking, previous_status)

    Raises:
        BadRequestError: If status is not a known value
        NotFoundError: If the booking does not exist
    """
    if not is_valid_status(status):
        raise BadRequestError(INVALID_STATUS_MESSAGE)

    booking = get_booking(db, booking_id)
    previous_status = booking.status
    booking.status = status
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s status %s -> %s", booking.id, previous_status, status)

    record_completion(db, booking, previous_status)
    return booking, previous_status


def is_new_completion(previous_status: Optional[str], new_status: str) -> bool:
    return previous_status != "completed" and new_status == "completed"


def apply_completion_stats(db: Session, booking: Booking) -> float:
    """
    Bump mentee and mentor counters for one completed session.

    Mentee: completed_sessions +1, hours_learned += parsed duration.
    Mentor: total_sessions +1.
    Missing profiles are created first. Returns the hours added.
    """
    hours = parse_duration_hours(booking.duration)

    mentee_profile = user_crud.get_or_create_mentee_profile(db, booking.user_id)
    mentee_profile.completed_sessions = (mentee_profile.completed_sessions or 0) + 1
    mentee_profile.hours_learned = (mentee_profile.hours_learned or 0.0) + hours

    mentor_profile = user_crud.get_or_create_mentor_profile(db, booking.mentor_id)
    mentor_profile.total_sessions = (mentor_profile.total_sessions or 0) + 1

    db.commit()
    return hours


def record_completion(db: Session, booking: Booking, previous_status: Optional[str]) -> bool:
    """
    Run the completion side effect at most once per completion.

    Failures are logged and rolled back; the status change already
    committed stays in place.
    """
    if not is_new_completion(previous_status, booking.status):
        return False
    try:
        hours = apply_completion_stats(db, booking)
    except Exception:
        db.rollback()
        logger.exception("Failed to update user stats for completed booking %s", booking.id)
        return False
    logger.info("Booking %s completed, %.2f hours credited to user %s", booking.id, hours, booking.user_id)
    return True
