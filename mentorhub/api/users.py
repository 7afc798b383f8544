# mentorhub/api/users.py
"""
Users API Router

Endpoints:
- GET /users - All users (summary)
- GET /users/{user_id} - One user
- GET /user?email= - One user by email
- PUT /users/{user_id} - Update account fields (auth)
- PUT /users/{user_id}/password - Change password (auth)
- DELETE /users/{user_id} - Delete account (auth)
- GET /mentors - Verified mentors, filtered and paginated
- GET /students - Students, filtered and paginated
- POST /profile - Upsert profile by email (auth)
- GET /profile/{email} - Profile by email
- POST /profile/upload-picture - Replace the profile picture (multipart, auth)
- DELETE /profile/delete-picture - Remove the profile picture (auth)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session

from mentorhub.database import get_db
from mentorhub.errors import BadRequestError
from mentorhub.models.user import User
from mentorhub.schemas.user import (
    MentorListResponse,
    PasswordChange,
    ProfilePictureDelete,
    ProfilePictureResponse,
    ProfileUpsert,
    StudentListResponse,
    UserListResponse,
    UserMessageResponse,
    UserResponse,
    UserUpdate,
)
from mentorhub.services import resource_service, user_service
from mentorhub.utils.security import get_current_user

router = APIRouter(tags=["users"])


# ======================
# USERS
# ======================
@router.get("/users", response_model=UserListResponse)
def list_users(db: Session = Depends(get_db)):
    return {"users": user_service.list_users(db)}


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return {"user": user_service.get_user_or_404(db, user_id)}


@router.get("/user", response_model=UserResponse)
def get_user_by_email(email: Optional[str] = None, db: Session = Depends(get_db)):
    return {"user": user_service.get_user_by_email_or_404(db, email)}


@router.put("/users/{user_id}", response_model=UserMessageResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_service.update_user(db, user_id, payload.model_dump(exclude_unset=True))
    return {"message": "User updated successfully", "user": user}


@router.put("/users/{user_id}/password")
def change_password(
    user_id: int,
    payload: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_service.change_password(db, user_id, payload.current_password, payload.new_password)
    return {"message": "Password updated successfully"}


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_service.delete_user(db, user_id)
    return {"message": "User deleted successfully"}


# ======================
# DIRECTORY
# ======================
@router.get("/mentors", response_model=MentorListResponse)
def list_mentors(
    page: int = 1,
    limit: int = 10,
    domain: Optional[str] = None,
    skills: Optional[str] = None,
    experience: Optional[str] = None,
    min_rating: Optional[float] = None,
    db: Session = Depends(get_db),
):
    result = user_service.list_mentors(
        db,
        page=page,
        limit=limit,
        domain=domain,
        skills=skills,
        experience=experience,
        min_rating=min_rating,
    )
    return {"mentors": result.pop("items"), **result}


@router.get("/students", response_model=StudentListResponse)
def list_students(
    page: int = 1,
    limit: int = 10,
    skills: Optional[str] = None,
    interests: Optional[str] = None,
    current_level: Optional[str] = None,
    db: Session = Depends(get_db),
):
    result = user_service.list_students(
        db,
        page=page,
        limit=limit,
        skills=skills,
        interests=interests,
        current_level=current_level,
    )
    return {"students": result.pop("items"), **result}


# ======================
# PROFILE
# ======================
@router.post("/profile", response_model=UserMessageResponse)
def upsert_profile(
    payload: ProfileUpsert,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_service.upsert_profile(db, payload.model_dump())
    return {"message": "Profile updated successfully", "user": user}


@router.get("/profile/{email}", response_model=UserResponse)
def get_profile(email: str, db: Session = Depends(get_db)):
    user = user_service.get_user_by_email_or_404(db, email, message="User profile not found")
    return {"user": user}


@router.post("/profile/upload-picture", response_model=ProfilePictureResponse)
def upload_profile_picture(
    request: Request,
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    email: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if profile_picture is None or not profile_picture.filename:
        raise BadRequestError("No file uploaded")
    if not user_service.is_allowed_picture(profile_picture.filename, profile_picture.content_type):
        raise BadRequestError(user_service.INVALID_PICTURE_MESSAGE)

    stored_path = resource_service.store_upload(
        profile_picture.file, profile_picture.filename, subdir=user_service.PROFILE_PICTURE_DIR
    )
    user = user_service.set_profile_picture(db, email, stored_path)
    return {
        "message": "Profile picture uploaded successfully",
        "profile_picture": user.profile_picture,
        "url": str(request.base_url).rstrip("/") + user.profile_picture,
    }


@router.delete("/profile/delete-picture")
def delete_profile_picture(
    payload: ProfilePictureDelete,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_service.delete_profile_picture(db, payload.email)
    return {"message": "Profile picture deleted successfully"}
