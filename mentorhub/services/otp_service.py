# mentorhub/services/otp_service.py
"""
One-time verification codes for the email and phone channels.

Email codes go out over SMTP when it is configured. There is no SMS
provider: phone codes are written to the log outside production only.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from mentorhub import models
from mentorhub.config import settings
from mentorhub.errors import BadRequestError, NotFoundError
from mentorhub.utils.email import send_otp_email
from mentorhub.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

CHANNELS = ("email", "phone")


def _now() -> datetime:
    return utcnow()


def generate_otp() -> str:
    return str(secrets.randbelow(900000) + 100000)


def _find_user(db: Session, channel: Optional[str], email: Optional[str], phone: Optional[str]) -> models.User:
    if channel not in CHANNELS:
        raise BadRequestError("Invalid channel")
    value = email if channel == "email" else phone
    if not value:
        raise BadRequestError(f"Missing {channel}")

    if channel == "email":
        user = db.query(models.User).filter(models.User.email == value.strip().lower()).first()
    else:
        user = db.query(models.User).filter(models.User.phone == value).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def _deliver(user: models.User, channel: str, code: str) -> None:
    if channel == "email":
        if send_otp_email(user.email, code):
            return
        if settings.is_production:
            logger.warning("Email OTP for %s could not be delivered", user.email)
        else:
            logger.info("Email OTP for %s: %s", user.email, code)
        return

    if settings.is_production:
        logger.warning("No SMS provider configured; phone OTP for user %s not delivered", user.id)
    else:
        logger.info("Phone OTP for %s: %s", user.phone, code)


def send_otp(db: Session, channel: Optional[str], email: Optional[str] = None, phone: Optional[str] = None) -> str:
    """
    Issue a fresh code on a channel, replacing any earlier one.

    Returns:
        The generated code (callers must not echo it to clients)

    Raises:
        BadRequestError: Unknown channel or missing identifier
        NotFoundError: No user for the identifier
    """
    user = _find_user(db, channel, email, phone)
    code = generate_otp()
    expires = _now() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)

    if channel == "email":
        user.email_otp = code
        user.email_otp_expires_at = expires
    else:
        user.phone_otp = code
        user.phone_otp_expires_at = expires
    db.commit()

    _deliver(user, channel, code)
    return code


def verify_otp(
    db: Session,
    channel: Optional[str],
    otp: Optional[str],
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> models.User:
    """
    Check a code and mark the channel verified.

    Raises:
        BadRequestError: Bad channel, missing code, nothing requested,
            expired, or mismatch
        NotFoundError: No user for the identifier
    """
    if channel not in CHANNELS:
        raise BadRequestError("Invalid channel")
    if not otp:
        raise BadRequestError("OTP is required")
    user = _find_user(db, channel, email, phone)

    if channel == "email":
        stored, expires_at = user.email_otp, user.email_otp_expires_at
    else:
        stored, expires_at = user.phone_otp, user.phone_otp_expires_at

    if not stored or not expires_at:
        raise BadRequestError("No OTP requested")
    if _now() > expires_at:
        raise BadRequestError("OTP expired")
    if not secrets.compare_digest(stored, otp):
        raise BadRequestError("Invalid OTP")

    if channel == "email":
        user.is_email_verified = True
        user.email_otp = None
        user.email_otp_expires_at = None
    else:
        user.is_phone_verified = True
        user.phone_otp = None
        user.phone_otp_expires_at = None
    db.commit()
    logger.info("User %s verified %s", user.id, channel)
    return user
