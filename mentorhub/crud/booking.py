# mentorhub/crud/booking.py
"""
Booking CRUD Operations
Plain queries shared by the booking, rating and streak services.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from mentorhub.models.booking import Booking


def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.user))
        .filter(Booking.id == booking_id)
        .first()
    )


def list_bookings(db: Session) -> List[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.user))
        .order_by(Booking.date.asc(), Booking.id.asc())
        .all()
    )


def list_bookings_for_user(db: Session, user_id: int) -> List[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.user_id == user_id)
        .order_by(Booking.date.asc(), Booking.id.asc())
        .all()
    )


def list_bookings_for_mentor(db: Session, mentor_id: int) -> List[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.user))
        .filter(Booking.mentor_id == mentor_id)
        .order_by(Booking.date.asc(), Booking.id.asc())
        .all()
    )


def list_bookings_between(db: Session, start: date, end: date) -> List[Booking]:
    return (
        db.query(Booking)
        .options(joinedload(Booking.user))
        .filter(Booking.date >= start, Booking.date <= end)
        .order_by(Booking.date.asc(), Booking.id.asc())
        .all()
    )


def list_completed_dates(db: Session, user_id: int) -> List[date]:
    """Dates of a mentee's completed sessions, oldest first."""
    rows = (
        db.query(Booking.date)
        .filter(Booking.user_id == user_id, Booking.status == "completed")
        .order_by(Booking.date.asc())
        .all()
    )
    return [row[0] for row in rows]


def list_mentor_ratings(db: Session, mentor_id: int) -> List[int]:
    """Ratings left on a mentor's completed sessions."""
    rows = (
        db.query(Booking.rating)
        .filter(
            Booking.mentor_id == mentor_id,
            Booking.status == "completed",
            Booking.rating.isnot(None),
            Booking.rating >= 1,
        )
        .all()
    )
    return [row[0] for row in rows]


def list_mentee_ratings(db: Session, mentee_id: int) -> List[int]:
    """Ratings a mentee has given on their completed sessions."""
    rows = (
        db.query(Booking.rating)
        .filter(
            Booking.user_id == mentee_id,
            Booking.status == "completed",
            Booking.rating.isnot(None),
            Booking.rating >= 1,
        )
        .all()
    )
    return [row[0] for row in rows]
