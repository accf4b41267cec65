"""
Authentication schemas for request/response models.
"""

from pydantic import EmailStr

from letsgo.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """Schema for account registration."""

    email: EmailStr
    name: str
    password: str


class LoginRequest(CamelModel):
    """Schema for credential login."""

    email: EmailStr
    password: str


class EmailRequest(CamelModel):
    """Schema for resend-verification and password-reset requests."""

    email: EmailStr


class ResetPasswordRequest(CamelModel):
    """Schema for choosing a new password with a reset token."""

    token: str
    new_password: str = ""
