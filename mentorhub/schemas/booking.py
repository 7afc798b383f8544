# mentorhub/schemas/booking.py
"""
Booking Pydantic Schemas
Request bodies accept camelCase keys (``userId``) as well as snake_case.
"""

from datetime import date as date_type, datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _date_only(value):
    """Accept full ISO timestamps from date pickers and keep the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


# ======================
# BOOKING REQUEST MODELS
# ======================

class BookingCreate(BaseModel):
    user_id: Optional[int] = None
    mentor_id: Optional[int] = None
    mentor_name: Optional[str] = None
    session_type: Optional[str] = None
    duration: Optional[str] = None
    date: Annotated[Optional[date_type], BeforeValidator(_date_only)] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    cost: Optional[float] = None
    topics: List[str] = Field(default_factory=list)

    model_config = _REQUEST_CONFIG


class BookingUpdate(BaseModel):
    mentor_name: Optional[str] = None
    session_type: Optional[str] = None
    duration: Optional[str] = None
    date: Annotated[Optional[date_type], BeforeValidator(_date_only)] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    cost: Optional[float] = None
    status: Any = None
    topics: Optional[List[str]] = None
    start_time: Optional[str] = None

    model_config = _REQUEST_CONFIG


class BookingStatusUpdate(BaseModel):
    # Validated against BOOKING_STATUSES in the service so the API answers 400, not 422
    status: Any = None


class BookingRating(BaseModel):
    # Type and range are checked in the service for the same reason
    rating: Any = None
    review: Optional[str] = Field(None, max_length=2000)
    user_id: Optional[int] = None

    model_config = _REQUEST_CONFIG


# ======================
# BOOKING RESPONSE MODELS
# ======================

class BookingResponse(BaseModel):
    id: int
    user_id: int
    mentor_id: int
    mentor_name: str
    session_type: str
    duration: str
    date: date_type
    time: str
    notes: Optional[str] = None
    cost: float
    status: str
    rating: Optional[int] = None
    review: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    start_time: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("topics", mode="before")
    @classmethod
    def _none_topics(cls, v):
        return v or []


class BookingMessageResponse(BaseModel):
    message: str
    booking: BookingResponse


class RatingSubmitResponse(BaseModel):
    message: str
    booking: BookingResponse
    mentor_average_rating: Optional[float] = None
    mentor_total_reviews: Optional[int] = None


class StreakResponse(BaseModel):
    user_id: int
    current_streak: int
    longest_streak: int
