"""MentorHub: mentorship matching API."""

__version__ = "0.1"
