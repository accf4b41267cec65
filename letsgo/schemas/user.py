"""
Profile schemas.
"""

from typing import Optional
from uuid import UUID

from letsgo.schemas.base import CamelModel


class ImageDescriptor(CamelModel):
    """Public path of an image plus the stored file name."""

    path: str
    filename: str


class MeResponse(CamelModel):
    id: UUID
    name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    image: Optional[ImageDescriptor] = None


class ProfileResponse(MeResponse):
    google_id: Optional[str] = None


class ProfileImageResponse(CamelModel):
    name: Optional[str] = None
    image: Optional[ImageDescriptor] = None
