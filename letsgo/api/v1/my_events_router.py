"""
Event management and likes for the signed-in user.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from letsgo.core.deps import get_current_user_id, get_event_service
from letsgo.schemas.base import MessageResponse
from letsgo.schemas.event import (
    EventFields,
    EventPage,
    EventResponse,
    LikeStatus,
    LikeToggleResponse,
)
from letsgo.services.event_query import Pagination
from letsgo.services.events import EventService

router = APIRouter(tags=["my events"], dependencies=[Depends(get_current_user_id)])


def event_form(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    number: Optional[str] = Form(None),
    district: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    local: Optional[str] = Form(None),
    date: Optional[datetime] = Form(None),
    hour: Optional[str] = Form(None),
) -> EventFields:
    """Multipart event fields; absent ones stay unset."""
    return EventFields(
        title=title,
        description=description,
        category=category,
        address=address,
        number=number,
        district=district,
        city=city,
        state=state,
        local=local,
        date=date,
        hour=hour,
    )


@router.get("/listar-meus-eventos", response_model=EventPage)
async def list_my_events(
    page: int = 1,
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    events, total_pages = event_service.list_owned(user_id, Pagination.from_params(page))
    return EventPage(events=events, total_pages=total_pages)


@router.post("/criar-evento", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    fields: EventFields = Depends(event_form),
    image: Optional[UploadFile] = File(None),
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    return await event_service.create(user_id, fields, image)


@router.get("/eventos/{event_id}", response_model=EventResponse)
async def get_my_event(
    event_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    return event_service.get_owned(user_id, event_id)


@router.put("/eventos/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    fields: EventFields = Depends(event_form),
    image: Optional[UploadFile] = File(None),
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    return await event_service.update(user_id, event_id, fields, image)


@router.delete("/eventos/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    event_service.delete(user_id, event_id)
    return MessageResponse(message="Event deleted successfully.")


@router.post("/curtir-evento/{event_id}", response_model=LikeToggleResponse)
async def toggle_like(
    event_id: UUID,
    response: Response,
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    if event_service.toggle_like(user_id, event_id):
        response.status_code = status.HTTP_201_CREATED
        return LikeToggleResponse(message="Event liked", liked=True)
    return LikeToggleResponse(message="Like removed", liked=False)


@router.delete("/descurtir-evento/{event_id}", response_model=MessageResponse)
async def unlike_event(
    event_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    event_service.unlike(user_id, event_id)
    return MessageResponse(message="Like removed successfully.")


@router.get("/verificar-curtida/{event_id}", response_model=LikeStatus)
async def check_like(
    event_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    return LikeStatus(liked=event_service.is_liked(user_id, event_id))


@router.get("/listar-meus-favoritos", response_model=EventPage)
async def list_my_favorites(
    page: int = 1,
    user_id: UUID = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
):
    events, total_pages = event_service.list_favorites(user_id, Pagination.from_params(page))
    return EventPage(events=events, total_pages=total_pages)
