"""Profile reads and updates for the signed-in user."""

from typing import Optional
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.orm import Session

import letsgo.models as models
from letsgo.core.errors import Conflict, NotFound
from letsgo.core.logger import LetsGoLogger
from letsgo.core.security import get_password_hash
from letsgo.services.auth import ensure_password_strength
from letsgo.services.storage import ImageStorage


class ProfileService:
    def __init__(self, db: Session, storage: Optional[ImageStorage] = None):
        self.db = db
        self.storage = storage

    def get(self, user_id: UUID) -> models.User:
        user = self.db.get(models.User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def update(
        self,
        user_id: UUID,
        *,
        name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        upload: Optional[UploadFile] = None,
    ) -> models.User:
        """
        Apply the submitted profile fields.

        An empty ``last_name`` clears it; a new image replaces the stored
        file, which is deleted once the update is committed.
        """
        user = self.get(user_id)

        if email and email != user.email:
            other = self.db.scalar(select(models.User).where(models.User.email == email))
            if other is not None and other.id != user_id:
                raise Conflict("This email is already in use by another user")
            user.email = email

        if name is not None:
            user.name = name
        if last_name is not None:
            user.last_name = last_name or None

        if password:
            user.password_hash = get_password_hash(ensure_password_strength(password))

        old_image = None
        image = await self.storage.save(upload)
        if image is not None:
            old_image, user.image = user.image, image

        self.db.commit()
        self.db.refresh(user)
        self.storage.delete(old_image)
        LetsGoLogger.info(f"Profile updated for user {user.id}")
        return user
