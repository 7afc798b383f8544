# mentorhub/services/user_service.py
"""
User Service Layer
Registration, login, account updates, directory listings, profile upsert
and profile pictures.
"""

import logging
import math
import os
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from mentorhub import models
from mentorhub.config import settings
from mentorhub.crud import user as user_crud
from mentorhub.errors import BadRequestError, NotFoundError
from mentorhub.models.user import USER_ROLES
from mentorhub.services.resource_service import remove_stored_file
from mentorhub.utils import validators
from mentorhub.utils.security import (
    authenticate_user,
    get_password_hash,
    issue_user_token,
    verify_password,
)
from mentorhub.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

# Never writable through the generic update path
PROTECTED_FIELDS = {
    "id",
    "password",
    "password_hash",
    "email_otp",
    "email_otp_expires_at",
    "phone_otp",
    "phone_otp_expires_at",
}


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


# ======================
# REGISTRATION / LOGIN
# ======================

def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: Optional[str] = "student",
    phone: Optional[str] = None,
) -> models.User:
    """
    Validate input and create the account with its role profile.

    Raises:
        BadRequestError: Invalid email, password, phone or role, or the
            email is already registered
    """
    email = _normalize_email(email)
    name = (name or "").strip()
    role = (role or "student").strip().lower()

    if not name:
        raise BadRequestError("Name is required")
    if not validators.validate_email(email):
        raise BadRequestError(validators.EMAIL_MESSAGE)
    if not validators.validate_password(password):
        raise BadRequestError(validators.PASSWORD_MESSAGE)
    if not validators.validate_phone(phone):
        raise BadRequestError(validators.PHONE_MESSAGE)
    if role not in USER_ROLES:
        raise BadRequestError("Role must be one of: " + ", ".join(USER_ROLES))
    if user_crud.get_user_by_email(db, email):
        raise BadRequestError("User already exists")

    user = user_crud.create_user(db, name=name, email=email, password=password, role=role, phone=phone)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s user %s", role, user.id)
    return user


def login(db: Session, email: str, password: str) -> Optional[Dict[str, Any]]:
    """Return token payload on success, None on bad credentials."""
    user = authenticate_user(db, _normalize_email(email), password)
    if not user:
        return None

    user.last_login = utcnow()
    db.commit()

    token = issue_user_token(user)
    return {
        "access_token": token,
        "token_type": "bearer",
        "role": user.role,
        "user_id": user.id,
        "name": user.name,
        "email": user.email,
    }


# ======================
# LOOKUPS
# ======================

def list_users(db: Session) -> List[models.User]:
    return db.query(models.User).order_by(models.User.id.asc()).all()


def get_user_or_404(db: Session, user_id: int) -> models.User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_by_email_or_404(db: Session, email: Optional[str], message: str = "User not found") -> models.User:
    email = _normalize_email(email)
    if not email:
        raise BadRequestError("email is required")
    user = user_crud.get_user_by_email(db, email)
    if not user:
        raise NotFoundError(message)
    return user


# ======================
# ACCOUNT UPDATES
# ======================

def update_user(db: Session, user_id: int, changes: Dict[str, Any]) -> models.User:
    user = get_user_or_404(db, user_id)
    changes = {k: v for k, v in changes.items() if k not in PROTECTED_FIELDS}

    if changes.get("email"):
        email = _normalize_email(changes["email"])
        if not validators.validate_email(email):
            raise BadRequestError(validators.EMAIL_MESSAGE)
        clash = (
            db.query(models.User)
            .filter(models.User.email == email, models.User.id != user_id)
            .first()
        )
        if clash:
            raise BadRequestError("Email already exists")
        changes["email"] = email
    if changes.get("name"):
        changes["name"] = changes["name"].strip()
    if changes.get("phone"):
        changes["phone"] = changes["phone"].strip()
        if not validators.validate_phone(changes["phone"]):
            raise BadRequestError(validators.PHONE_MESSAGE)

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def change_password(
    db: Session,
    user_id: int,
    current_password: Optional[str],
    new_password: Optional[str],
) -> None:
    if not current_password or not new_password:
        raise BadRequestError("Current password and new password are required")
    if not validators.validate_password(new_password):
        raise BadRequestError(validators.PASSWORD_MESSAGE)

    user = get_user_or_404(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise BadRequestError("Current password is incorrect")

    user.password_hash = get_password_hash(new_password)
    db.commit()
    logger.info("Password changed for user %s", user.id)


def delete_user(db: Session, user_id: int) -> None:
    user = get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User %s deleted", user_id)


# ======================
# DIRECTORY LISTINGS
# ======================

def _split_csv(value: Optional[str]) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def _paginate(items: list, page: int, limit: int) -> Dict[str, Any]:
    page = max(page, 1)
    limit = max(limit, 1)
    total = len(items)
    start = (page - 1) * limit
    return {
        "items": items[start:start + limit],
        "total_pages": math.ceil(total / limit),
        "current_page": page,
        "total": total,
    }


def list_mentors(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    domain: Optional[str] = None,
    skills: Optional[str] = None,
    experience: Optional[str] = None,
    min_rating: Optional[float] = None,
) -> Dict[str, Any]:
    """Active, verified mentors, best rated first, then busiest."""
    query = (
        db.query(models.User)
        .join(models.MentorProfile, models.MentorProfile.user_id == models.User.id)
        .options(joinedload(models.User.mentor_profile))
        .filter(
            models.User.role == "mentor",
            models.User.is_active.is_(True),
            models.MentorProfile.is_verified.is_(True),
        )
    )
    if domain:
        query = query.filter(models.User.company.ilike(f"%{domain}%"))
    if experience:
        query = query.filter(models.MentorProfile.experience == experience)
    if min_rating is not None:
        query = query.filter(models.MentorProfile.average_rating >= min_rating)

    mentors = query.order_by(
        models.MentorProfile.average_rating.desc(),
        models.MentorProfile.total_sessions.desc(),
        models.User.id.asc(),
    ).all()

    # skills is a JSON list column; filter in Python
    wanted = set(_split_csv(skills))
    if wanted:
        mentors = [m for m in mentors if wanted.intersection(m.skills or [])]
    return _paginate(mentors, page, limit)


def list_students(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    skills: Optional[str] = None,
    interests: Optional[str] = None,
    current_level: Optional[str] = None,
) -> Dict[str, Any]:
    query = (
        db.query(models.User)
        .outerjoin(models.MenteeProfile, models.MenteeProfile.user_id == models.User.id)
        .options(joinedload(models.User.mentee_profile))
        .filter(models.User.role == "student", models.User.is_active.is_(True))
    )
    if interests:
        query = query.filter(models.MenteeProfile.interests.ilike(f"%{interests}%"))
    if current_level:
        query = query.filter(models.MenteeProfile.current_level == current_level)

    students = query.order_by(models.User.created_at.desc(), models.User.id.desc()).all()

    wanted = set(_split_csv(skills))
    if wanted:
        students = [s for s in students if wanted.intersection(s.skills or [])]
    return _paginate(students, page, limit)


# ======================
# PROFILE UPSERT
# ======================

def upsert_profile(db: Session, data: Dict[str, Any]) -> models.User:
    """
    Update a user's profile by email, plus mentor or mentee extras.

    Performance counters are never taken from the request.
    """
    user = get_user_by_email_or_404(db, data.get("email"))
    mentor_extras = data.get("mentor_extras")
    mentee_extras = data.get("mentee_extras")

    for field in ("name", "phone", "location", "bio", "profile_picture", "education", "company", "position"):
        if data.get(field) is not None:
            setattr(user, field, data[field])
    for field in ("skills", "languages", "certifications", "availability"):
        setattr(user, field, data.get(field) or [])
    if user.phone and not validators.validate_phone(user.phone):
        raise BadRequestError(validators.PHONE_MESSAGE)

    role = data.get("role") or user.role
    if role == "mentor" and mentor_extras is not None:
        profile = user_crud.get_or_create_mentor_profile(db, user.id)
        profile.domain = data.get("company") or ""
        profile.experience = data.get("experience") or ""
        profile.hourly_rate = data.get("hourly_rate") or ""
        profile.languages = ", ".join(data.get("languages") or [])
        profile.services = ", ".join(mentor_extras.get("services") or [])
        profile.availability = ", ".join(data.get("availability") or [])
        profile.industries = mentor_extras.get("industries") or []
        profile.mentorship_formats = mentor_extras.get("formats") or []
        profile.communication_style = mentor_extras.get("communication_style") or ""
        profile.timezone = mentor_extras.get("timezone") or ""
        profile.max_students = mentor_extras.get("max_students") or 10
        profile.preferred_student_level = mentor_extras.get("preferred_student_level") or []

    if role == "student" and mentee_extras is not None:
        profile = user_crud.get_or_create_mentee_profile(db, user.id)
        profile.target_role = mentee_extras.get("target_role") or ""
        profile.current_level = mentee_extras.get("current_level") or ""
        profile.interests = ", ".join(mentee_extras.get("interests") or [])
        profile.goals = ", ".join(mentee_extras.get("goals") or [])
        profile.learning_style = mentee_extras.get("learning_style") or ""
        profile.portfolio_links = mentee_extras.get("portfolio_links") or []
        profile.preferred_communication_style = mentee_extras.get("preferred_communication_style") or ""
        profile.timezone = mentee_extras.get("timezone") or ""
        profile.preferred_mentor_types = mentee_extras.get("preferred_mentor_types") or []

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)
    return user


# ======================
# PROFILE PICTURES
# ======================

PROFILE_PICTURE_DIR = "profiles"
PROFILE_PICTURE_URL_PREFIX = "/uploads/profiles/"
PROFILE_PICTURE_TYPES = ("jpeg", "jpg", "png", "gif", "webp")
MAX_PROFILE_PICTURE_BYTES = 5 * 1024 * 1024

INVALID_PICTURE_MESSAGE = "Invalid file type. Only image files (JPEG, JPG, PNG, GIF, WEBP) are allowed."


def is_allowed_picture(filename: Optional[str], content_type: Optional[str]) -> bool:
    extension = os.path.splitext(filename or "")[1].lower().lstrip(".")
    subtype = (content_type or "").lower().rpartition("/")[2]
    return extension in PROFILE_PICTURE_TYPES and subtype in PROFILE_PICTURE_TYPES


def picture_file_path(profile_picture: Optional[str]) -> Optional[str]:
    """Disk path of a picture this API stored; None for external URLs."""
    if not profile_picture or not profile_picture.startswith(PROFILE_PICTURE_URL_PREFIX):
        return None
    return os.path.join(settings.UPLOAD_DIR, PROFILE_PICTURE_DIR, os.path.basename(profile_picture))


def set_profile_picture(db: Session, email: Optional[str], stored_path: str) -> models.User:
    """
    Point a user's profile picture at an already stored upload.

    The previous picture is removed once the new one is saved. On any
    failure the new upload is removed instead.

    Raises:
        BadRequestError: Missing email or oversized image
        NotFoundError: Unknown email
    """
    try:
        if not _normalize_email(email):
            raise BadRequestError("Email is required")
        user = get_user_by_email_or_404(db, email)
        if os.path.getsize(stored_path) > MAX_PROFILE_PICTURE_BYTES:
            raise BadRequestError("Profile picture must be 5MB or smaller")
        previous_path = picture_file_path(user.profile_picture)
        user.profile_picture = PROFILE_PICTURE_URL_PREFIX + os.path.basename(stored_path)
        db.commit()
    except Exception:
        db.rollback()
        remove_stored_file(stored_path)
        raise
    db.refresh(user)
    remove_stored_file(previous_path)
    logger.info("Profile picture updated for user %s", user.id)
    return user


def delete_profile_picture(db: Session, email: Optional[str]) -> None:
    if not _normalize_email(email):
        raise BadRequestError("Email is required")
    user = get_user_by_email_or_404(db, email)
    if not user.profile_picture:
        raise BadRequestError("No profile picture to delete")
    stored_path = picture_file_path(user.profile_picture)
    user.profile_picture = None
    db.commit()
    remove_stored_file(stored_path)
    logger.info("Profile picture removed for user %s", user.id)
