"""
Core module exports.
"""

from .config import settings
from .constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PASSWORD_LENGTH,
    UPLOAD_URL_PREFIX,
)

__all__ = [
    "settings",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MIN_PASSWORD_LENGTH",
    "UPLOAD_URL_PREFIX",
]
