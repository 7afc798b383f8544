# mentorhub/services/blog_service.py
"""
Blog Service Layer
Posts, likes and comments. Writes are tied to the authenticated user.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from mentorhub.errors import ForbiddenError, NotFoundError
from mentorhub.models.blog import Blog, BlogComment
from mentorhub.models.user import User

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 150
UPDATABLE_FIELDS = ("title", "content", "excerpt", "category", "tags", "cover_image", "is_published")


def default_excerpt(content: str) -> str:
    return content[:EXCERPT_LENGTH] + "..."


def get_blog(db: Session, blog_id: int) -> Blog:
    blog = db.query(Blog).filter(Blog.id == blog_id).first()
    if not blog:
        raise NotFoundError("Blog post not found")
    return blog


def _owned_blog(db: Session, blog_id: int, user: User, action: str) -> Blog:
    blog = get_blog(db, blog_id)
    if blog.author_id != user.id:
        raise ForbiddenError(f"Not authorized to {action} this post")
    return blog


def create_blog(db: Session, author: User, data: Dict[str, Any]) -> Blog:
    blog = Blog(
        title=data["title"],
        content=data["content"],
        excerpt=data.get("excerpt") or default_excerpt(data["content"]),
        author_id=author.id,
        category=data["category"],
        tags=data.get("tags") or [],
        cover_image=data.get("cover_image"),
    )
    db.add(blog)
    db.commit()
    db.refresh(blog)
    logger.info("Blog %s created by user %s", blog.id, author.id)
    return blog


def list_blogs(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    search: Optional[str] = None,
    author: Optional[int] = None,
) -> Dict[str, Any]:
    page = max(page, 1)
    limit = max(limit, 1)

    query = db.query(Blog).filter(Blog.is_published.is_(True))
    if category and category != "all":
        query = query.filter(Blog.category == category)
    if author:
        query = query.filter(Blog.author_id == author)
    if search:
        pattern = f"%{search}%"
        # tags is JSON; matching on its text form is enough for a search box
        query = query.filter(
            or_(
                Blog.title.ilike(pattern),
                Blog.content.ilike(pattern),
                cast(Blog.tags, String).ilike(pattern),
            )
        )

    total = query.count()
    blogs = (
        query.order_by(Blog.published_at.desc(), Blog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "blogs": blogs,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
        "total": total,
    }


def view_blog(db: Session, blog_id: int) -> Blog:
    """Fetch a post and count the view."""
    blog = get_blog(db, blog_id)
    blog.views = (blog.views or 0) + 1
    db.commit()
    db.refresh(blog)
    return blog


def update_blog(db: Session, blog_id: int, user: User, changes: Dict[str, Any]) -> Blog:
    blog = _owned_blog(db, blog_id, user, "update")
    for field in UPDATABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(blog, field, changes[field])
    db.commit()
    db.refresh(blog)
    return blog


def delete_blog(db: Session, blog_id: int, user: User) -> None:
    blog = _owned_blog(db, blog_id, user, "delete")
    db.delete(blog)
    db.commit()
    logger.info("Blog %s deleted by user %s", blog_id, user.id)


def toggle_like(db: Session, blog_id: int, user: User) -> List[int]:
    """Like or unlike; returns the ids of everyone who now likes the post."""
    blog = get_blog(db, blog_id)
    if user in blog.likes:
        blog.likes.remove(user)
    else:
        blog.likes.append(user)
    db.commit()
    db.refresh(blog)
    return blog.like_ids


def add_comment(db: Session, blog_id: int, user: User, content: str) -> List[BlogComment]:
    """Add a comment; returns all comments, newest first."""
    blog = get_blog(db, blog_id)
    db.add(BlogComment(blog_id=blog.id, user_id=user.id, content=content))
    db.commit()
    db.refresh(blog)
    return list(blog.comments)
