"""Authentication service layer."""

import smtplib
from typing import Any, Dict, Optional
from urllib.parse import urljoin
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import letsgo.models as models
from letsgo.core.config import settings
from letsgo.core.constants import MIN_PASSWORD_LENGTH
from letsgo.core.errors import Conflict, Forbidden, NotFound, ValidationFailed
from letsgo.core.logger import LetsGoLogger
from letsgo.core.security import (
    create_access_token,
    generate_single_use_token,
    get_password_hash,
    utcnow,
    verify_password,
)
from letsgo.schemas.auth import RegisterRequest
from letsgo.services.mail import Mailer, password_reset_email, verification_email

RESEND_VERIFICATION_MESSAGE = (
    "If the email is registered and not yet verified, a new verification link has been sent."
)
RESET_REQUEST_MESSAGE = "If the email is registered, a password recovery link has been sent."
VERIFICATION_SUBJECT = "Verificação de email - Let's Go Party"
RESET_SUBJECT = "Recuperação de senha"


def ensure_password_strength(password: Optional[str]) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    return password


def frontend_link(path: str) -> str:
    return urljoin(settings.frontend_url, path)


class AuthService:
    """Registration, credential login and the single-use token flows."""

    def __init__(self, db: Session, mailer: Mailer):
        self.db = db
        self.mailer = mailer

    def get_user_by_email(self, email: str) -> Optional[models.User]:
        return self.db.scalar(select(models.User).where(models.User.email == email))

    def get_user_by_id(self, user_id: UUID) -> Optional[models.User]:
        return self.db.get(models.User, user_id)

    def get_user_by_google_id(self, google_id: str) -> Optional[models.User]:
        return self.db.scalar(select(models.User).where(models.User.google_id == google_id))

    def _deliver(self, to: str, subject: str, body_html: str) -> None:
        # The mutation that triggered the mail is already committed
        try:
            self.mailer.send(to, subject, body_html)
        except (smtplib.SMTPException, OSError):
            LetsGoLogger.exception(f"Failed to send '{subject}' to {to}")

    def _send_verification(self, user: models.User, resend: bool = False) -> None:
        url = frontend_link(f"/verificar-email/{user.verification_token}")
        self._deliver(user.email, VERIFICATION_SUBJECT, verification_email(user.name, url, resend))

    def register(self, data: RegisterRequest) -> models.User:
        """Create an unverified account and mail its verification link."""
        if self.get_user_by_email(data.email):
            raise Conflict("This email is already registered")
        ensure_password_strength(data.password)

        token, expires = generate_single_use_token(settings.verification_token_ttl_minutes)
        user = models.User(
            email=data.email,
            name=data.name,
            password_hash=get_password_hash(data.password),
            verified=False,
            verification_token=token,
            verification_token_expires=expires,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent registration took the email first
            self.db.rollback()
            raise Conflict("This email is already registered")
        self.db.refresh(user)
        LetsGoLogger.info(f"Registered user {user.id}")

        self._send_verification(user)
        return user

    def verify_email(self, token: str) -> models.User:
        """Consume a verification token. A token can only be used once."""
        user = self.db.scalar(
            select(models.User).where(models.User.verification_token == token)
        )
        if user is None:
            raise ValidationFailed("Invalid or already used token")

        expires = user.verification_token_expires
        if expires is not None and expires < utcnow():
            raise ValidationFailed("Token expired, request a new link")

        user.verified = True
        user.verification_token = None
        user.verification_token_expires = None
        self.db.commit()
        LetsGoLogger.info(f"Verified email for user {user.id}")
        return user

    def resend_verification(self, email: str) -> str:
        """Issue a fresh verification token. The reply never reveals whether the email exists."""
        user = self.get_user_by_email(email)
        if user is None or user.verified:
            return RESEND_VERIFICATION_MESSAGE

        user.verification_token, user.verification_token_expires = generate_single_use_token(
            settings.verification_token_ttl_minutes
        )
        self.db.commit()

        self._send_verification(user, resend=True)
        return RESEND_VERIFICATION_MESSAGE

    def request_password_reset(self, email: str) -> str:
        user = self.get_user_by_email(email)
        if user is None:
            return RESET_REQUEST_MESSAGE

        user.reset_password_token, user.reset_password_expires = generate_single_use_token(
            settings.reset_token_ttl_minutes
        )
        self.db.commit()

        url = frontend_link(f"/redefinir-senha/{user.reset_password_token}")
        self._deliver(
            user.email,
            RESET_SUBJECT,
            password_reset_email(user.name, url, settings.reset_token_ttl_minutes),
        )
        return RESET_REQUEST_MESSAGE

    def get_user_by_reset_token(self, token: str) -> models.User:
        """User holding an unexpired reset token."""
        user = self.db.scalar(
            select(models.User).where(
                models.User.reset_password_token == token,
                models.User.reset_password_expires > utcnow(),
            )
        )
        if user is None:
            raise ValidationFailed("The token is invalid or has expired")
        return user

    def reset_password(self, token: str, new_password: Optional[str]) -> None:
        user = self.get_user_by_reset_token(token)
        ensure_password_strength(new_password)

        user.password_hash = get_password_hash(new_password)
        user.reset_password_token = None
        user.reset_password_expires = None
        self.db.commit()
        LetsGoLogger.info(f"Password reset for user {user.id}")

    def login(self, email: str, password: str) -> str:
        """Check credentials and return a signed session token."""
        user = self.get_user_by_email(email)
        if user is None:
            raise NotFound("User not found")

        if not user.verified:
            raise Forbidden(
                "Please verify your email before logging in",
                extra={"needsVerification": True},
            )

        if not verify_password(password, user.password_hash):
            raise ValidationFailed("Invalid password")

        return create_access_token(user.id)

    def upsert_google_user(self, info: Dict[str, Any]) -> models.User:
        """
        Create or link the account behind a Google sign-in.

        New accounts are verified and password-less. Existing accounts get
        the Google id linked and adopt the Google picture only when they have
        no image or a locally uploaded one.
        """
        picture = info.get("picture")
        google_image = (
            {"path": picture, "filename": f"google_{info['google_id']}"} if picture else None
        )

        # The Google subject is stable; the email may have been changed in the profile
        user = self.get_user_by_google_id(info["google_id"]) or self.get_user_by_email(
            info["email"]
        )
        if user is None:
            user = models.User(
                email=info["email"],
                name=info.get("name"),
                last_name=info.get("last_name"),
                password_hash="",
                verified=True,
                google_id=info["google_id"],
                image=google_image,
            )
            self.db.add(user)
        else:
            user.google_id = info["google_id"]
            current_path = (user.image or {}).get("path", "")
            if google_image and not current_path.startswith("http"):
                user.image = google_image

        self.db.commit()
        self.db.refresh(user)
        LetsGoLogger.info(f"Google sign-in for user {user.id}")
        return user
