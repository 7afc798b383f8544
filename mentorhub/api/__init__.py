# mentorhub/api/__init__.py
# This file makes the api directory a Python package.

from . import auth
from . import blogs
from . import bookings
from . import chat
from . import realtime
from . import resources
from . import users

__all__ = [
    "auth",
    "users",
    "bookings",
    "chat",
    "resources",
    "blogs",
    "realtime",
]
