"""
Public event listings and search.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from letsgo.core.config import settings
from letsgo.core.constants import DEFAULT_PAGE_SIZE
from letsgo.core.deps import get_event_service
from letsgo.schemas.event import (
    EventDetailResponse,
    EventListResponse,
    EventPage,
    SliderEvent,
)
from letsgo.services.event_query import Pagination
from letsgo.services.events import EventService

router = APIRouter(tags=["events"])


@router.get("/listar-eventos-recentes", response_model=EventListResponse)
async def list_recent_events(event_service: EventService = Depends(get_event_service)):
    return EventListResponse(
        message="Last 5 events listed successfully",
        events=event_service.list_recent(),
    )


@router.get("/listar-todos-eventos", response_model=EventListResponse)
async def list_upcoming_events(event_service: EventService = Depends(get_event_service)):
    return EventListResponse(
        message="Upcoming events listed successfully",
        events=event_service.list_upcoming(),
    )


@router.get("/mostrar-evento/{event_id}", response_model=EventDetailResponse)
async def show_event(event_id: UUID, event_service: EventService = Depends(get_event_service)):
    return EventDetailResponse(event=event_service.get(event_id))


@router.get("/eventos-slider", response_model=List[SliderEvent])
async def slider_events(event_service: EventService = Depends(get_event_service)):
    return event_service.slider(settings.public_api_url)


@router.get("/listar-eventos-paginados", response_model=EventPage)
async def list_paginated_events(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    event_service: EventService = Depends(get_event_service),
):
    """Upcoming events in an optional calendar-date range, soonest first."""
    events, total_pages = event_service.list_paginated(
        Pagination.from_params(page, limit), start_date, end_date
    )
    return EventPage(events=events, total_pages=total_pages)


@router.get("/filtrar-eventos", response_model=EventPage)
async def filter_events(
    page: int = 1,
    category: Optional[str] = None,
    event_service: EventService = Depends(get_event_service),
):
    events, total_pages = event_service.filter_by_category(Pagination.from_params(page), category)
    return EventPage(events=events, total_pages=total_pages)


@router.get("/buscar-eventos", response_model=EventPage)
async def search_events(
    page: int = 1,
    category: Optional[str] = None,
    search: Optional[str] = None,
    event_service: EventService = Depends(get_event_service),
):
    events, total_pages = event_service.search(Pagination.from_params(page), search, category)
    return EventPage(events=events, total_pages=total_pages)


@router.get("/buscar-eventos-data", response_model=EventPage)
async def search_events_by_date(
    page: int = 1,
    search: Optional[str] = None,
    date_filter: Optional[str] = Query(None, alias="dateFilter"),
    event_service: EventService = Depends(get_event_service),
):
    """Text search inside a named date bucket such as ``hoje`` or ``este-mes``."""
    events, total_pages = event_service.search_by_date(
        Pagination.from_params(page), search, date_filter
    )
    return EventPage(events=events, total_pages=total_pages)
