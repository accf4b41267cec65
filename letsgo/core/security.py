"""Password hashing, session tokens and single-use tokens."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from letsgo.core.config import settings
from letsgo.core.constants import TOKEN_BYTES

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


def utcnow() -> datetime:
    """Naive UTC timestamp, the convention used for every stored datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash. OAuth-only accounts have no hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed session token for ``user_id``."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)

    to_encode: Dict[str, Any] = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry of a session token and return its claims.

    Raises ``JWTError`` (or a subclass such as ``ExpiredSignatureError``)
    when the token cannot be trusted.
    """
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise JWTError("Token is not an access token")
    return payload


def generate_single_use_token(ttl_minutes: int) -> Tuple[str, datetime]:
    """Random hex token plus its absolute (naive UTC) expiry."""
    token = secrets.token_hex(TOKEN_BYTES)
    return token, utcnow() + timedelta(minutes=ttl_minutes)
