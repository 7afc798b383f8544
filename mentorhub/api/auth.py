# mentorhub/api/auth.py
"""
Auth API Router

Endpoints:
- GET /health
- GET /validation-rules
- POST /validate
- POST /register
- POST /login
- POST /otp/send, /otp/verify, /otp/resend
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from mentorhub.database import get_db
from mentorhub.schemas.auth import (
    LoginRequest,
    MessageResponse,
    OTPSendRequest,
    OTPVerifyRequest,
    Token,
    UserRegister,
    ValidateRequest,
)
from mentorhub.schemas.user import UserSummary
from mentorhub.services import otp_service, user_service
from mentorhub.utils import validators

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/health")
def health_check():
    return {"status": "ok", "message": "MentorHub API is running"}


@router.get("/validation-rules")
def get_validation_rules():
    return validators.validation_rules()


@router.post("/validate")
def validate_fields(payload: ValidateRequest):
    """Check any of email / password / phone against the registration rules."""
    results = {}
    if payload.email is not None:
        valid = validators.validate_email(payload.email.strip().lower())
        results["email"] = {"valid": valid, "message": None if valid else validators.EMAIL_MESSAGE}
    if payload.password is not None:
        valid = validators.validate_password(payload.password)
        results["password"] = {"valid": valid, "message": None if valid else validators.PASSWORD_MESSAGE}
    if payload.phone is not None:
        valid = validators.validate_phone(payload.phone)
        results["phone"] = {"valid": valid, "message": None if valid else validators.PHONE_MESSAGE}
    return {"valid": all(r["valid"] for r in results.values()), "results": results}


# ======================
# REGISTER / LOGIN
# ======================
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    user = user_service.register_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        phone=payload.phone,
    )
    return {
        "message": "User registered successfully",
        "user": UserSummary.model_validate(user),
    }


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    result = user_service.login(db, payload.email, payload.password)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result


# ======================
# OTP
# ======================
@router.post("/otp/send", response_model=MessageResponse)
def send_otp(payload: OTPSendRequest, db: Session = Depends(get_db)):
    otp_service.send_otp(db, payload.channel, email=payload.email, phone=payload.phone)
    return {"message": "OTP sent"}


@router.post("/otp/verify", response_model=MessageResponse)
def verify_otp(payload: OTPVerifyRequest, db: Session = Depends(get_db)):
    otp_service.verify_otp(db, payload.channel, payload.otp, email=payload.email, phone=payload.phone)
    return {"message": "Verified successfully"}


@router.post("/otp/resend", response_model=MessageResponse)
def resend_otp(payload: OTPSendRequest, db: Session = Depends(get_db)):
    otp_service.send_otp(db, payload.channel, email=payload.email, phone=payload.phone)
    return {"message": "OTP resent"}
