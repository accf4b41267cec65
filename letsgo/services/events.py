"""Event listings, owner-only mutations and likes."""

from typing import Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import letsgo.models as models
from letsgo.core.constants import (
    RECENT_EVENTS_LIMIT,
    SLIDER_EVENTS_LIMIT,
    UPCOMING_EVENTS_LIMIT,
)
from letsgo.core.errors import Forbidden, NotFound, ValidationFailed
from letsgo.core.logger import LetsGoLogger
from letsgo.core.security import utcnow
from letsgo.schemas.event import EventFields
from letsgo.services.event_query import (
    EventQuery,
    Pagination,
    bucket_window,
    explicit_range_window,
)
from letsgo.services.storage import ImageStorage


class EventService:
    def __init__(self, db: Session, storage: Optional[ImageStorage] = None):
        self.db = db
        self.storage = storage

    # Public reads

    def list_recent(self) -> List[models.Event]:
        return EventQuery().order_by_date(descending=True).fetch(self.db, RECENT_EVENTS_LIMIT)

    def list_upcoming(self) -> List[models.Event]:
        return (
            EventQuery()
            .where(models.Event.date >= utcnow())
            .order_by_date(descending=True)
            .fetch(self.db, UPCOMING_EVENTS_LIMIT)
        )

    def slider(self, public_base_url: str) -> List[Dict]:
        """Next upcoming events with images expanded to absolute URLs."""
        events = (
            EventQuery()
            .where(models.Event.date >= utcnow())
            .order_by_date()
            .fetch(self.db, SLIDER_EVENTS_LIMIT)
        )
        base = public_base_url.rstrip("/")
        return [
            {
                "id": event.id,
                "title_event": event.title,
                "description_event": event.description,
                "image": f"{base}{event.image['path']}" if event.image else None,
                "date": event.date,
            }
            for event in events
        ]

    def get(self, event_id: UUID) -> models.Event:
        event = self.db.get(models.Event, event_id)
        if event is None:
            raise NotFound("Event not found")
        return event

    def list_paginated(
        self,
        pagination: Pagination,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Tuple[List[models.Event], int]:
        window = explicit_range_window(start_date, end_date)
        LetsGoLogger.debug(f"Paginated listing window {window}, limit {pagination.limit}")
        return EventQuery().within(window).order_by_date().page(self.db, pagination)

    def filter_by_category(
        self, pagination: Pagination, category: Optional[str]
    ) -> Tuple[List[models.Event], int]:
        return (
            EventQuery()
            .in_category(category)
            .order_by_date(descending=True)
            .page(self.db, pagination)
        )

    def search(
        self, pagination: Pagination, search: Optional[str], category: Optional[str] = None
    ) -> Tuple[List[models.Event], int]:
        return (
            EventQuery()
            .in_category(category)
            .matching(search)
            .order_by_date(descending=True)
            .page(self.db, pagination)
        )

    def search_by_date(
        self, pagination: Pagination, search: Optional[str], date_filter: Optional[str]
    ) -> Tuple[List[models.Event], int]:
        return (
            EventQuery()
            .within(bucket_window(date_filter))
            .matching(search)
            .order_by_date()
            .page(self.db, pagination)
        )

    # Owner operations

    def list_owned(self, user_id: UUID, pagination: Pagination) -> Tuple[List[models.Event], int]:
        return (
            EventQuery()
            .where(models.Event.user_id == user_id)
            .order_by_date(descending=True)
            .page(self.db, pagination)
        )

    def get_owned(self, user_id: UUID, event_id: UUID) -> models.Event:
        event = self.get(event_id)
        if event.user_id != user_id:
            raise Forbidden("You do not have permission to edit this event")
        return event

    async def create(
        self, user_id: UUID, data: EventFields, upload: Optional[UploadFile]
    ) -> models.Event:
        image = await self.storage.save(upload)
        if image is None:
            raise ValidationFailed("Image not sent")
        if not data.title or data.date is None:
            self.storage.delete(image)
            raise ValidationFailed("Title and date are required")

        event = models.Event(**data.model_dump(exclude_none=True), image=image, user_id=user_id)
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        LetsGoLogger.info(f"Event {event.id} created by user {user_id}")
        return event

    async def update(
        self,
        user_id: UUID,
        event_id: UUID,
        data: EventFields,
        upload: Optional[UploadFile],
    ) -> models.Event:
        event = self.get_owned(user_id, event_id)

        for field, value in data.model_dump(exclude_none=True).items():
            setattr(event, field, value)

        old_image = None
        image = await self.storage.save(upload)
        if image is not None:
            old_image, event.image = event.image, image

        self.db.commit()
        self.db.refresh(event)
        self.storage.delete(old_image)
        LetsGoLogger.info(f"Event {event.id} updated by user {user_id}")
        return event

    def delete(self, user_id: UUID, event_id: UUID) -> None:
        event = self.get_owned(user_id, event_id)
        image = event.image

        self.db.delete(event)
        self.db.commit()
        self.storage.delete(image)
        LetsGoLogger.info(f"Event {event_id} deleted by user {user_id}")

    # Likes

    def _like_criteria(self, user_id: UUID, event_id: UUID):
        return (models.Like.user_id == user_id, models.Like.event_id == event_id)

    def toggle_like(self, user_id: UUID, event_id: UUID) -> bool:
        """
        Flip the like on ``event_id`` and return whether it is now liked.

        The delete is conditional on the (user, event) pair and the insert is
        guarded by the unique constraint, so racing toggles can never leave
        two rows for the same pair.
        """
        self.get(event_id)

        removed = self.db.execute(
            delete(models.Like).where(*self._like_criteria(user_id, event_id))
        ).rowcount
        if removed:
            self.db.commit()
            return False

        try:
            self.db.add(models.Like(user_id=user_id, event_id=event_id))
            self.db.commit()
        except IntegrityError:
            # A concurrent toggle inserted the same pair first
            self.db.rollback()
        return True

    def unlike(self, user_id: UUID, event_id: UUID) -> None:
        removed = self.db.execute(
            delete(models.Like).where(*self._like_criteria(user_id, event_id))
        ).rowcount
        if not removed:
            self.db.rollback()
            raise NotFound("Like not found")
        self.db.commit()

    def is_liked(self, user_id: UUID, event_id: UUID) -> bool:
        like_id = self.db.scalar(
            select(models.Like.id).where(*self._like_criteria(user_id, event_id))
        )
        return like_id is not None

    def list_favorites(
        self, user_id: UUID, pagination: Pagination
    ) -> Tuple[List[models.Event], int]:
        """Liked events, most recently liked first."""
        likes = self.db.scalars(
            select(models.Like)
            .where(models.Like.user_id == user_id)
            .order_by(models.Like.created_at.desc(), models.Like.id)
            .offset(pagination.skip)
            .limit(pagination.limit)
        )
        total = self.db.scalar(
            select(func.count()).select_from(models.Like).where(models.Like.user_id == user_id)
        )
        return [like.event for like in likes], pagination.total_pages(total or 0)
