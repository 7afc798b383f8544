# mentorhub/models/booking.py
from sqlalchemy import (
    JSON,
    TIMESTAMP,
    CheckConstraint,
    Column,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship
from mentorhub.database import Base

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    # Mentee who booked
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentor_name = Column(String(100), nullable=False)
    session_type = Column(String(50), nullable=False)  # video-call, phone-call etc.
    duration = Column(String(50), nullable=False)      # "30min", "1 hour" etc.
    date = Column(Date, nullable=False, index=True)
    time = Column(String(20), nullable=False)
    notes = Column(Text)
    cost = Column(Float, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pending")
    rating = Column(Integer)
    review = Column(Text)
    topics = Column(JSON, default=list)
    start_time = Column(String(20))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="check_booking_rating_range"),
    )

    user = relationship("User", foreign_keys=[user_id], back_populates="bookings")
    mentor = relationship("User", foreign_keys=[mentor_id], back_populates="mentor_bookings")

    @property
    def user_name(self):
        return self.user.name if self.user else None

    @property
    def user_email(self):
        return self.user.email if self.user else None
