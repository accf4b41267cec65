"""
Service layer: domain operations behind the HTTP routers.
"""

from .auth import AuthService
from .events import EventService
from .mail import Mailer
from .profile import ProfileService
from .storage import ImageStorage

__all__ = [
    "AuthService",
    "EventService",
    "ImageStorage",
    "Mailer",
    "ProfileService",
]
