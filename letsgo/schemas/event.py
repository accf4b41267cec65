"""
Event schemas.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import field_validator

from letsgo.schemas.base import CamelModel
from letsgo.schemas.user import ImageDescriptor


class EventFields(CamelModel):
    """Editable event attributes, as submitted in the multipart form."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    address: Optional[str] = None
    number: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    local: Optional[str] = None
    date: Optional[datetime] = None
    hour: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        """Store timestamps as naive UTC."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class EventResponse(EventFields):
    id: UUID
    title: str
    date: datetime
    image: Optional[ImageDescriptor] = None
    user_id: UUID
    created_at: Optional[datetime] = None


class EventPage(CamelModel):
    events: List[EventResponse]
    total_pages: int


class EventListResponse(CamelModel):
    message: str
    events: List[EventResponse]


class EventDetailResponse(CamelModel):
    event: EventResponse


class SliderEvent(CamelModel):
    """Slider card with the image expanded to a full public URL."""

    id: UUID
    title_event: str
    description_event: Optional[str] = None
    image: Optional[str] = None
    date: datetime


class LikeToggleResponse(CamelModel):
    message: str
    liked: bool


class LikeStatus(CamelModel):
    liked: bool
