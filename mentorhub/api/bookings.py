# mentorhub/api/bookings.py
"""
Booking API Router

Endpoints:
- POST /bookings/ - Create a booking (mentee -> mentor)
- GET /bookings/ - List all bookings
- GET /bookings/date-range - Bookings between two dates (inclusive)
- GET /bookings/mentor/{mentor_id} - Bookings for a mentor
- GET|PUT|DELETE /bookings/booking/{booking_id} - Single booking
- PATCH /bookings/booking/{booking_id}/status - Status transition
- POST /bookings/booking/{booking_id}/rate - Rate a completed session
- GET /bookings/user/{user_id} - Bookings for a mentee
- GET /bookings/user/{user_id}/streak - Weekly learning streak
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from mentorhub.database import get_db
from mentorhub.schemas.booking import (
    BookingCreate,
    BookingMessageResponse,
    BookingRating,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
    RatingSubmitResponse,
    StreakResponse,
)
from mentorhub.services import booking_service, notification_service, rating_service, streak_service
from mentorhub.services.presence import PresenceRegistry, get_presence

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _notify_status(background_tasks: BackgroundTasks, presence: PresenceRegistry, booking) -> None:
    notification_service.schedule(
        background_tasks,
        presence,
        booking.user_email,
        notification_service.BOOKING_STATUS_UPDATED,
        notification_service.booking_status_payload(booking),
    )


# ======================
# CREATE / LIST
# ======================
@router.post("/", response_model=BookingMessageResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    presence: PresenceRegistry = Depends(get_presence),
):
    """Create a pending booking and tell the mentor if they are online."""
    booking = booking_service.create_booking(db, payload.model_dump())
    mentor = booking.mentor
    notification_service.schedule(
        background_tasks,
        presence,
        mentor.email if mentor else None,
        notification_service.NEW_SESSION_REQUEST,
        notification_service.new_session_request_payload(booking, booking.user),
    )
    return {"message": "Booking created successfully", "booking": booking}


@router.get("/", response_model=List[BookingResponse])
def list_bookings(db: Session = Depends(get_db)):
    return booking_service.list_bookings(db)


@router.get("/date-range", response_model=List[BookingResponse])
def list_bookings_in_range(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return booking_service.list_bookings_in_range(db, start_date, end_date)


@router.get("/mentor/{mentor_id}", response_model=List[BookingResponse])
def list_mentor_bookings(mentor_id: int, db: Session = Depends(get_db)):
    return booking_service.list_mentor_bookings(db, mentor_id)


@router.get("/user/{user_id}", response_model=List[BookingResponse])
def list_user_bookings(user_id: int, db: Session = Depends(get_db)):
    return booking_service.list_user_bookings(db, user_id)


@router.get("/user/{user_id}/streak", response_model=StreakResponse)
def get_learning_streak(user_id: int, db: Session = Depends(get_db)):
    return streak_service.get_learning_streak(db, user_id)


# ======================
# SINGLE BOOKING
# ======================
@router.get("/booking/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    return booking_service.get_booking(db, booking_id)


@router.put("/booking/{booking_id}", response_model=BookingMessageResponse)
def update_booking(
    booking_id: int,
    payload: BookingUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    presence: PresenceRegistry = Depends(get_presence),
):
    booking, previous_status = booking_service.update_booking(
        db, booking_id, payload.model_dump(exclude_unset=True)
    )
    if previous_status is not None:
        _notify_status(background_tasks, presence, booking)
    return {"message": "Booking updated successfully", "booking": booking}


@router.delete("/booking/{booking_id}")
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_id)
    return {"message": "Booking deleted successfully"}


# ======================
# STATUS / RATING
# ======================
@router.patch("/booking/{booking_id}/status", response_model=BookingMessageResponse)
def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    presence: PresenceRegistry = Depends(get_presence),
):
    """
    Move a booking through its lifecycle.

    Completing a booking credits the mentee's sessions and hours and the
    mentor's session count exactly once. The mentee gets a
    booking-status-updated event if connected.
    """
    booking, _ = booking_service.update_status(db, booking_id, payload.status)
    _notify_status(background_tasks, presence, booking)
    return {"message": "Booking status updated successfully", "booking": booking}


@router.post("/booking/{booking_id}/rate", response_model=RatingSubmitResponse)
def rate_booking(booking_id: int, payload: BookingRating, db: Session = Depends(get_db)):
    """Rate a completed session (owning mentee only) and refresh averages."""
    return rating_service.submit_rating(
        db,
        booking_id,
        user_id=payload.user_id,
        rating=payload.rating,
        review=payload.review,
    )
