# tests/test_booking_service.py
"""
Booking lifecycle: creation, status transitions and completion stats.
"""

from datetime import date

import pytest

from mentorhub.errors import BadRequestError, NotFoundError
from mentorhub.models.user import MenteeProfile, MentorProfile
from mentorhub.services import booking_service


def _profiles(db_session, mentee, mentor):
    mentee_profile = db_session.query(MenteeProfile).filter_by(user_id=mentee.id).one()
    mentor_profile = db_session.query(MentorProfile).filter_by(user_id=mentor.id).one()
    return mentee_profile, mentor_profile


# ======================
# CREATE
# ======================

def test_create_booking_is_pending(db_session, mentee, mentor):
    booking = booking_service.create_booking(
        db_session,
        {
            "user_id": mentee.id,
            "mentor_id": mentor.id,
            "mentor_name": mentor.name,
            "session_type": "video-call",
            "duration": "1 hour",
            "date": date(2026, 3, 2),
            "time": "10:00",
            "topics": ["fastapi"],
        },
    )

    assert booking.id is not None
    assert booking.status == "pending"
    assert booking.cost == 0
    assert booking.topics == ["fastapi"]


def test_create_booking_missing_fields(db_session, mentee):
    with pytest.raises(BadRequestError, match="Missing required fields"):
        booking_service.create_booking(db_session, {"user_id": mentee.id})


def test_create_booking_unknown_mentor(db_session, mentee):
    with pytest.raises(NotFoundError, match="Mentor not found"):
        booking_service.create_booking(
            db_session,
            {
                "user_id": mentee.id,
                "mentor_id": 999,
                "mentor_name": "Nobody",
                "session_type": "video-call",
                "duration": "1 hour",
                "date": date(2026, 3, 2),
                "time": "10:00",
            },
        )


def test_date_range_requires_both_dates(db_session):
    with pytest.raises(BadRequestError):
        booking_service.list_bookings_in_range(db_session, date(2026, 3, 1), None)


def test_date_range_is_inclusive(db_session, mentee, mentor, make_booking):
    make_booking(mentee, mentor, on=date(2026, 3, 1))
    make_booking(mentee, mentor, on=date(2026, 3, 5))
    make_booking(mentee, mentor, on=date(2026, 3, 6))

    found = booking_service.list_bookings_in_range(db_session, date(2026, 3, 1), date(2026, 3, 5))

    assert [b.date for b in found] == [date(2026, 3, 1), date(2026, 3, 5)]


# ======================
# STATUS TRANSITIONS
# ======================

@pytest.mark.parametrize(
    "duration, hours",
    [("1 hour", 1.0), ("2 hours", 2.0), ("90 min", 1.5), ("30min", 0.5), ("flexible", 0.0)],
)
def test_completion_credits_hours_and_sessions(db_session, mentee, mentor, make_booking, duration, hours):
    booking = make_booking(mentee, mentor, status="confirmed", duration=duration)

    updated, previous = booking_service.update_status(db_session, booking.id, "completed")

    mentee_profile, mentor_profile = _profiles(db_session, mentee, mentor)
    assert previous == "confirmed"
    assert updated.status == "completed"
    assert mentee_profile.completed_sessions == 1
    assert mentee_profile.hours_learned == pytest.approx(hours)
    assert mentor_profile.total_sessions == 1


def test_completing_twice_does_not_double_count(db_session, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor, status="confirmed", duration="2 hours")

    booking_service.update_status(db_session, booking.id, "completed")
    booking_service.update_status(db_session, booking.id, "completed")

    mentee_profile, mentor_profile = _profiles(db_session, mentee, mentor)
    assert mentee_profile.completed_sessions == 1
    assert mentee_profile.hours_learned == pytest.approx(2.0)
    assert mentor_profile.total_sessions == 1


def test_non_completion_transitions_leave_stats_alone(db_session, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor)

    booking_service.update_status(db_session, booking.id, "confirmed")
    booking_service.update_status(db_session, booking.id, "cancelled")

    mentee_profile, mentor_profile = _profiles(db_session, mentee, mentor)
    assert mentee_profile.completed_sessions == 0
    assert mentor_profile.total_sessions == 0


def test_invalid_status_rejected_and_booking_unchanged(db_session, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor, status="confirmed")

    with pytest.raises(BadRequestError, match="Invalid status"):
        booking_service.update_status(db_session, booking.id, "archived")

    db_session.expire_all()
    assert booking_service.get_booking(db_session, booking.id).status == "confirmed"


def test_status_update_missing_booking(db_session):
    with pytest.raises(NotFoundError):
        booking_service.update_status(db_session, 12345, "confirmed")


def test_completion_creates_missing_profiles(db_session, make_user, make_booking):
    mentee = make_user(role="student", with_profile=False)
    mentor = make_user(role="mentor", with_profile=False)
    booking = make_booking(mentee, mentor, duration="45 minutes")

    booking_service.update_status(db_session, booking.id, "completed")

    mentee_profile, mentor_profile = _profiles(db_session, mentee, mentor)
    assert mentee_profile.completed_sessions == 1
    assert mentee_profile.hours_learned == pytest.approx(0.75)
    assert mentor_profile.total_sessions == 1


def test_stats_failure_keeps_status_change(db_session, mentee, mentor, make_booking, monkeypatch):
    booking = make_booking(mentee, mentor, status="confirmed")

    def boom(db, booking):
        raise RuntimeError("stats store unavailable")

    monkeypatch.setattr(booking_service, "apply_completion_stats", boom)

    updated, _ = booking_service.update_status(db_session, booking.id, "completed")

    db_session.expire_all()
    assert updated.status == "completed"
    assert booking_service.get_booking(db_session, booking.id).status == "completed"
    mentee_profile, _ = _profiles(db_session, mentee, mentor)
    assert mentee_profile.completed_sessions == 0


# ======================
# GENERIC UPDATE / DELETE
# ======================

def test_update_routes_status_through_transition_logic(db_session, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor, status="confirmed", duration="1 hour")

    updated, previous = booking_service.update_booking(
        db_session, booking.id, {"status": "completed", "notes": "great session", "rating": 5}
    )

    mentee_profile, _ = _profiles(db_session, mentee, mentor)
    assert previous == "confirmed"
    assert updated.notes == "great session"
    assert updated.rating is None
    assert mentee_profile.completed_sessions == 1


def test_update_rejects_unknown_status(db_session, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor)

    with pytest.raises(BadRequestError):
        booking_service.update_booking(db_session, booking.id, {"status": "archived"})


@pytest.mark.parametrize("field", booking_service.NOT_NULL_FIELDS)
def test_update_cannot_clear_required_fields(db_session, mentee, mentor, make_booking, field):
    booking = make_booking(mentee, mentor)

    with pytest.raises(BadRequestError, match=f"{field} cannot be empty"):
        booking_service.update_booking(db_session, booking.id, {field: None})

    db_session.expire_all()
    assert getattr(booking_service.get_booking(db_session, booking.id), field) is not None


@pytest.mark.parametrize("status", [5, None, ["completed"], {"status": "completed"}])
def test_non_string_status_rejected(db_session, mentee, mentor, make_booking, status):
    booking = make_booking(mentee, mentor, status="confirmed")

    with pytest.raises(BadRequestError, match="Invalid status"):
        booking_service.update_status(db_session, booking.id, status)


def test_delete_booking(db_session, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor)

    booking_service.delete_booking(db_session, booking.id)

    with pytest.raises(NotFoundError):
        booking_service.get_booking(db_session, booking.id)
