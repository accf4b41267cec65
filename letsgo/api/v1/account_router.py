"""
Registration, email verification and password reset.
"""

from fastapi import APIRouter, Depends, status

import letsgo.schemas.auth as auth_schemas
from letsgo.core.deps import get_auth_service
from letsgo.schemas.base import MessageResponse
from letsgo.services.auth import AuthService

router = APIRouter(tags=["account"])


@router.post(
    "/cadastro",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    user_create: auth_schemas.RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    auth_service.register(user_create)
    return MessageResponse(
        message="User registered successfully. Please check your email to activate your account."
    )


@router.get("/verificar-email/{token}", response_model=MessageResponse)
def verify_email(token: str, auth_service: AuthService = Depends(get_auth_service)):
    auth_service.verify_email(token)
    return MessageResponse(message="Email verified successfully!")


@router.post("/reenviar-verificacao", response_model=MessageResponse)
def resend_verification(
    body: auth_schemas.EmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    return MessageResponse(message=auth_service.resend_verification(body.email))


@router.post("/solicitar-redefinicao-senha", response_model=MessageResponse)
def request_password_reset(
    body: auth_schemas.EmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    return MessageResponse(message=auth_service.request_password_reset(body.email))


@router.get("/verificar-token-redefinicao/{token}", response_model=MessageResponse)
def check_reset_token(token: str, auth_service: AuthService = Depends(get_auth_service)):
    auth_service.get_user_by_reset_token(token)
    return MessageResponse(message="Token is valid")


@router.post("/redefinir-senha", response_model=MessageResponse)
def reset_password(
    body: auth_schemas.ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    auth_service.reset_password(body.token, body.new_password)
    return MessageResponse(message="Password reset successfully")
