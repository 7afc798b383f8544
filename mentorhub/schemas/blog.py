# mentorhub/schemas/blog.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BlogCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)
    tags: List[str] = Field(default_factory=list)
    cover_image: Optional[str] = None

    model_config = _REQUEST_CONFIG


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    cover_image: Optional[str] = None
    is_published: Optional[bool] = None

    model_config = _REQUEST_CONFIG


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class BlogAuthor(BaseModel):
    id: int
    name: str
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    role: str

    model_config = ConfigDict(from_attributes=True)


class CommentUser(BaseModel):
    id: int
    name: str
    profile_picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    id: int
    user: CommentUser
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BlogResponse(BaseModel):
    id: int
    title: str
    content: str
    excerpt: Optional[str] = None
    author: BlogAuthor
    category: str
    tags: List[str] = Field(default_factory=list)
    cover_image: Optional[str] = None
    views: int = 0
    like_ids: List[int] = Field(default_factory=list)
    comments: List[CommentResponse] = Field(default_factory=list)
    is_published: bool = True
    published_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags(cls, v):
        return v or []


class BlogList(BaseModel):
    blogs: List[BlogResponse]
    total_pages: int
    current_page: int
    total: int
