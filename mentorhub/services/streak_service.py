# mentorhub/services/streak_service.py
"""
Learning streaks: how many consecutive weeks a mentee has completed a session.
"""

from datetime import date, datetime
from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from mentorhub.crud import booking as booking_crud
from mentorhub.crud import user as user_crud
from mentorhub.errors import NotFoundError
from mentorhub.utils.timeutils import utc_today

WEEK_DAYS = 7


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def compute_streaks(dates: Iterable, today: date) -> Dict[str, int]:
    """
    Walk completed-session dates in ascending order.

    Sessions exactly a week apart extend the run, closer ones stay in the
    same week, and a gap longer than a week starts a new run. The current
    streak only counts if the latest session is within a week of ``today``.
    """
    days = sorted(_as_date(d) for d in dates)
    if not days:
        return {"current_streak": 0, "longest_streak": 0}

    longest = 0
    temp = 1
    for previous, current in zip(days, days[1:]):
        gap = (current - previous).days
        if gap == WEEK_DAYS:
            temp += 1
        elif gap > WEEK_DAYS:
            longest = max(longest, temp)
            temp = 1
    longest = max(longest, temp)

    current_streak = temp if (today - days[-1]).days <= WEEK_DAYS else 0
    return {"current_streak": current_streak, "longest_streak": longest}


def get_learning_streak(db: Session, user_id: int, today: Optional[date] = None) -> Dict[str, int]:
    if not user_crud.get_user(db, user_id):
        raise NotFoundError("User not found")
    dates = booking_crud.list_completed_dates(db, user_id)
    result = compute_streaks(dates, today or utc_today())
    return {"user_id": user_id, **result}
