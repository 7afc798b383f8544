from sqlalchemy import (
    JSON,
    TIMESTAMP,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship
from mentorhub.database import Base

USER_ROLES = ("student", "mentor")


# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student")
    phone = Column(String(20))

    # Profile fields
    location = Column(String(150))
    bio = Column(Text)
    profile_picture = Column(String(255))
    skills = Column(JSON, default=list)
    languages = Column(JSON, default=list)
    certifications = Column(JSON, default=list)
    education = Column(String(255))
    company = Column(String(150))
    position = Column(String(150))
    availability = Column(JSON, default=list)

    is_active = Column(Boolean, default=True)
    last_login = Column(TIMESTAMP)

    # Verification
    is_email_verified = Column(Boolean, default=False)
    is_phone_verified = Column(Boolean, default=False)
    email_otp = Column(String(6))
    email_otp_expires_at = Column(TIMESTAMP)
    phone_otp = Column(String(6))
    phone_otp_expires_at = Column(TIMESTAMP)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    mentor_profile = relationship(
        "MentorProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    mentee_profile = relationship(
        "MenteeProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    bookings = relationship(
        "Booking", foreign_keys="Booking.user_id", back_populates="user", cascade="all, delete-orphan"
    )
    mentor_bookings = relationship(
        "Booking", foreign_keys="Booking.mentor_id", back_populates="mentor", cascade="all, delete-orphan"
    )


# ---------------- MENTOR PROFILE ----------------
class MentorProfile(Base):
    __tablename__ = "mentor_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    domain = Column(String(150))
    experience = Column(String(100))
    hourly_rate = Column(String(50))
    languages = Column(String(255))
    services = Column(String(500))
    availability = Column(String(500))
    industries = Column(JSON, default=list)
    mentorship_formats = Column(JSON, default=list)

    # Performance metrics
    total_sessions = Column(Integer, default=0, nullable=False)
    active_students = Column(Integer, default=0, nullable=False)
    average_rating = Column(Float, default=0.0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)

    # Preferences
    max_students = Column(Integer, default=10)
    preferred_student_level = Column(JSON, default=list)
    communication_style = Column(String(100))
    timezone = Column(String(64))

    is_verified = Column(Boolean, default=False)

    user = relationship("User", back_populates="mentor_profile")


# ---------------- MENTEE PROFILE ----------------
class MenteeProfile(Base):
    __tablename__ = "mentee_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    target_role = Column(String(150))
    current_level = Column(String(50))
    interests = Column(String(500))
    goals = Column(String(500))
    learning_style = Column(String(100))
    portfolio_links = Column(JSON, default=list)

    # Learning progress
    completed_sessions = Column(Integer, default=0, nullable=False)
    active_mentors = Column(Integer, default=0, nullable=False)
    hours_learned = Column(Float, default=0.0, nullable=False)
    average_rating = Column(Float, default=0.0, nullable=False)

    # Preferences
    preferred_mentor_types = Column(JSON, default=list)
    preferred_communication_style = Column(String(100))
    timezone = Column(String(64))

    user = relationship("User", back_populates="mentee_profile")
