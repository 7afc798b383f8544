from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ======================
# PROFILE RESPONSE SCHEMAS
# ======================

class MentorProfileOut(BaseModel):
    domain: Optional[str] = None
    experience: Optional[str] = None
    hourly_rate: Optional[str] = None
    languages: Optional[str] = None
    services: Optional[str] = None
    availability: Optional[str] = None
    industries: List[str] = Field(default_factory=list)
    mentorship_formats: List[str] = Field(default_factory=list)
    total_sessions: int = 0
    active_students: int = 0
    average_rating: float = 0.0
    total_reviews: int = 0
    max_students: Optional[int] = None
    preferred_student_level: List[str] = Field(default_factory=list)
    communication_style: Optional[str] = None
    timezone: Optional[str] = None
    is_verified: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_validator("industries", "mentorship_formats", "preferred_student_level", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


class MenteeProfileOut(BaseModel):
    target_role: Optional[str] = None
    current_level: Optional[str] = None
    interests: Optional[str] = None
    goals: Optional[str] = None
    learning_style: Optional[str] = None
    portfolio_links: List[str] = Field(default_factory=list)
    completed_sessions: int = 0
    active_mentors: int = 0
    hours_learned: float = 0.0
    average_rating: float = 0.0
    preferred_mentor_types: List[str] = Field(default_factory=list)
    preferred_communication_style: Optional[str] = None
    timezone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("portfolio_links", "preferred_mentor_types", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


# ======================
# USER RESPONSE SCHEMAS
# ======================

class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    is_email_verified: bool = False
    is_phone_verified: bool = False

    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserSummary):
    """Full user record without password hash or OTP fields."""
    location: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    education: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    availability: List[str] = Field(default_factory=list)
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    mentor_profile: Optional[MentorProfileOut] = None
    mentee_profile: Optional[MenteeProfileOut] = None

    @field_validator("skills", "languages", "certifications", "availability", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


class UserListResponse(BaseModel):
    users: List[UserSummary]


class UserResponse(BaseModel):
    user: UserDetail


class UserMessageResponse(BaseModel):
    message: str
    user: UserDetail


class MentorListResponse(BaseModel):
    mentors: List[UserDetail]
    total_pages: int
    current_page: int
    total: int


class StudentListResponse(BaseModel):
    students: List[UserDetail]
    total_pages: int
    current_page: int
    total: int


# ======================
# UPDATE SCHEMAS
# ======================

class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    skills: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    education: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    availability: Optional[List[str]] = None
    is_active: Optional[bool] = None

    model_config = _REQUEST_CONFIG


class PasswordChange(BaseModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None

    model_config = _REQUEST_CONFIG


# ======================
# PROFILE UPSERT
# ======================

class MentorExtras(BaseModel):
    services: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    formats: List[str] = Field(default_factory=list)
    communication_style: Optional[str] = None
    timezone: Optional[str] = None
    max_students: Optional[int] = None
    preferred_student_level: List[str] = Field(default_factory=list)

    model_config = _REQUEST_CONFIG


class MenteeExtras(BaseModel):
    target_role: Optional[str] = None
    current_level: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    learning_style: Optional[str] = None
    portfolio_links: List[str] = Field(default_factory=list)
    preferred_communication_style: Optional[str] = None
    timezone: Optional[str] = None
    preferred_mentor_types: List[str] = Field(default_factory=list)

    model_config = _REQUEST_CONFIG


class ProfileUpsert(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    education: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    availability: List[str] = Field(default_factory=list)
    experience: Optional[str] = None
    hourly_rate: Optional[str] = None
    mentor_extras: Optional[MentorExtras] = None
    mentee_extras: Optional[MenteeExtras] = None

    model_config = _REQUEST_CONFIG


class ProfilePictureDelete(BaseModel):
    email: Optional[str] = None


class ProfilePictureResponse(BaseModel):
    message: str
    profile_picture: str
    url: str
