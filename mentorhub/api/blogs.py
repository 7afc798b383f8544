# mentorhub/api/blogs.py
"""
Blog API Router

Endpoints:
- GET /blogs/ - Published posts (paginated, filter, search)
- GET /blogs/{blog_id} - One post, counts a view
- POST /blogs/ - Create (auth)
- PUT /blogs/{blog_id} - Update, author only (auth)
- DELETE /blogs/{blog_id} - Delete, author only (auth)
- POST /blogs/{blog_id}/like - Toggle like (auth)
- POST /blogs/{blog_id}/comment - Add comment (auth)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mentorhub.database import get_db
from mentorhub.models.user import User
from mentorhub.schemas.blog import (
    BlogCreate,
    BlogList,
    BlogResponse,
    BlogUpdate,
    CommentCreate,
    CommentResponse,
)
from mentorhub.services import blog_service
from mentorhub.utils.security import get_current_user

router = APIRouter(prefix="/blogs", tags=["blogs"])


@router.get("/", response_model=BlogList)
def list_blogs(
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    search: Optional[str] = None,
    author: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return blog_service.list_blogs(
        db, page=page, limit=limit, category=category, search=search, author=author
    )


@router.get("/{blog_id}", response_model=BlogResponse)
def get_blog(blog_id: int, db: Session = Depends(get_db)):
    return blog_service.view_blog(db, blog_id)


@router.post("/", response_model=BlogResponse, status_code=status.HTTP_201_CREATED)
def create_blog(
    payload: BlogCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return blog_service.create_blog(db, current_user, payload.model_dump())


@router.put("/{blog_id}", response_model=BlogResponse)
def update_blog(
    blog_id: int,
    payload: BlogUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return blog_service.update_blog(db, blog_id, current_user, payload.model_dump(exclude_unset=True))


@router.delete("/{blog_id}")
def delete_blog(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    blog_service.delete_blog(db, blog_id, current_user)
    return {"message": "Blog post deleted successfully"}


@router.post("/{blog_id}/like", response_model=List[int])
def like_blog(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return blog_service.toggle_like(db, blog_id, current_user)


@router.post("/{blog_id}/comment", response_model=List[CommentResponse])
def add_comment(
    blog_id: int,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return blog_service.add_comment(db, blog_id, current_user, payload.content)
