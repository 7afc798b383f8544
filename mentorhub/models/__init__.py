# mentorhub/models/__init__.py
# Import models in dependency order
from .user import User, MentorProfile, MenteeProfile
from .booking import Booking
from .chat import Message, ChatRequest
from .resource import Resource
from .blog import Blog, BlogComment, blog_likes

__all__ = [
    "User",
    "MentorProfile",
    "MenteeProfile",
    "Booking",
    "Message",
    "ChatRequest",
    "Resource",
    "Blog",
    "BlogComment",
    "blog_likes",
]
