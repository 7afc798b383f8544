from typing import Optional

from sqlalchemy.orm import Session
from mentorhub import models
from mentorhub.utils.security import get_password_hash


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = "student",
    phone: Optional[str] = None,
):
    """Create a user plus the empty profile for its role (flushed, not committed)."""
    db_user = models.User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role=role,
        phone=phone,
        is_active=True,
    )
    db.add(db_user)
    db.flush()
    if role == "mentor":
        db.add(models.MentorProfile(user_id=db_user.id))
    else:
        db.add(models.MenteeProfile(user_id=db_user.id))
    db.flush()
    return db_user


def get_user(db: Session, user_id: int):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def get_or_create_mentor_profile(db: Session, user_id: int) -> models.MentorProfile:
    profile = db.query(models.MentorProfile).filter(
        models.MentorProfile.user_id == user_id
    ).first()
    if not profile:
        profile = models.MentorProfile(
            user_id=user_id,
            total_sessions=0,
            active_students=0,
            average_rating=0.0,
            total_reviews=0,
        )
        db.add(profile)
        db.flush()
    return profile


def get_or_create_mentee_profile(db: Session, user_id: int) -> models.MenteeProfile:
    profile = db.query(models.MenteeProfile).filter(
        models.MenteeProfile.user_id == user_id
    ).first()
    if not profile:
        profile = models.MenteeProfile(
            user_id=user_id,
            completed_sessions=0,
            active_mentors=0,
            hours_learned=0.0,
            average_rating=0.0,
        )
        db.add(profile)
        db.flush()
    return profile
