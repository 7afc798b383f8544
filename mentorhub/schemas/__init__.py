# mentorhub/schemas/__init__.py

# Auth schemas
from .auth import Token, LoginRequest, UserRegister, OTPSendRequest, OTPVerifyRequest

# User schemas
from .user import (
    UserSummary,
    UserDetail,
    UserUpdate,
    PasswordChange,
    ProfileUpsert,
    MentorListResponse,
    StudentListResponse,
    ProfilePictureDelete,
    ProfilePictureResponse,
)

# Booking schemas
from .booking import (
    BookingCreate,
    BookingUpdate,
    BookingStatusUpdate,
    BookingRating,
    BookingResponse,
    StreakResponse,
)

# Chat schemas (chat.MessageResponse is the stored message; auth.MessageResponse is a plain ack)
from .chat import MessageCreate, ChatRequestCreate, ChatRequestResponse

# Resource / blog schemas
from .resource import ResourceCreate, ResourceUpdate, ResourceResponse
from .blog import BlogCreate, BlogUpdate, BlogResponse, CommentCreate

__all__ = [
    "Token",
    "LoginRequest",
    "UserRegister",
    "OTPSendRequest",
    "OTPVerifyRequest",
    "UserSummary",
    "UserDetail",
    "UserUpdate",
    "PasswordChange",
    "ProfileUpsert",
    "MentorListResponse",
    "StudentListResponse",
    "ProfilePictureDelete",
    "ProfilePictureResponse",
    "BookingCreate",
    "BookingUpdate",
    "BookingStatusUpdate",
    "BookingRating",
    "BookingResponse",
    "StreakResponse",
    "MessageCreate",
    "ChatRequestCreate",
    "ChatRequestResponse",
    "ResourceCreate",
    "ResourceUpdate",
    "ResourceResponse",
    "BlogCreate",
    "BlogUpdate",
    "BlogResponse",
    "CommentCreate",
]
