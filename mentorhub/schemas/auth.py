from pydantic import BaseModel
from typing import Optional

# ======================
# TOKEN SCHEMAS
# ======================

class Token(BaseModel):
    access_token: str
    token_type: str
    role: str
    user_id: int
    name: str
    email: str


# ======================
# USER AUTHENTICATION SCHEMAS
# ======================

class LoginRequest(BaseModel):
    # Plain str: a malformed address is a failed login (401), not a 422
    email: str
    password: str


class UserRegister(BaseModel):
    # Format checks live in utils.validators so the API can answer 400 with its own messages
    name: str
    email: str
    password: str
    role: Optional[str] = "student"
    phone: Optional[str] = None


class ValidateRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None


# ======================
# OTP SCHEMAS
# ======================

class OTPSendRequest(BaseModel):
    channel: Optional[str] = None  # "email" | "phone"
    email: Optional[str] = None
    phone: Optional[str] = None


class OTPVerifyRequest(OTPSendRequest):
    otp: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
