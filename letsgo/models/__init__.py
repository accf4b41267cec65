"""Models for the database."""

from .event import Event
from .like import Like
from .user import User

__all__ = [
    "Event",
    "Like",
    "User",
]
