"""
Request dependencies: the bearer-token gate and service handles.
"""

from pathlib import Path
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from jose import JWTError
from sqlalchemy.orm import Session

from letsgo.core.config import settings
from letsgo.core.errors import InvalidOrExpiredToken, MalformedToken, Unauthenticated
from letsgo.core.security import decode_access_token
from letsgo.db.session import get_db
from letsgo.services.auth import AuthService
from letsgo.services.events import EventService
from letsgo.services.mail import Mailer
from letsgo.services.profile import ProfileService
from letsgo.services.storage import ImageStorage

BEARER_SCHEME = "bearer"


def get_current_user_id(authorization: Optional[str] = Header(default=None)) -> UUID:
    """
    Resolve the acting user from the ``Authorization`` header.

    Tokens are stateless: only the signature and expiry are checked, the
    user row is not loaded here.
    """
    if not authorization:
        raise Unauthenticated("Access denied: no token supplied")

    parts = authorization.split()
    if len(parts) != 2:
        raise MalformedToken("Token format error")

    scheme, token = parts
    if scheme.lower() != BEARER_SCHEME:
        raise MalformedToken("Invalid token scheme")

    try:
        payload = decode_access_token(token)
        return UUID(str(payload["sub"]))
    except (JWTError, KeyError, ValueError) as e:
        raise InvalidOrExpiredToken("Invalid or expired token", detail=str(e))


def get_mailer() -> Mailer:
    return Mailer.from_settings(settings)


def get_image_storage() -> ImageStorage:
    return ImageStorage(Path(settings.assets_dir) / "uploads" / "images")


def get_auth_service(
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> AuthService:
    return AuthService(db, mailer)


def get_event_service(
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> EventService:
    return EventService(db, storage)


def get_profile_service(
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> ProfileService:
    return ProfileService(db, storage)
