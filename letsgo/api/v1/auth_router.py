"""
Credential login and Google OAuth2 sign-in.
"""

from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, Request
from starlette.responses import RedirectResponse

import letsgo.schemas.auth as auth_schemas
from letsgo.core.config import settings
from letsgo.core.deps import get_auth_service
from letsgo.core.logger import LetsGoLogger
from letsgo.core.oauth import extract_user_info_google, oauth
from letsgo.core.security import create_access_token
from letsgo.services.auth import AuthService

router = APIRouter(tags=["authentication"])


def _frontend_redirect(path: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.frontend_url.rstrip('/')}{path}")


@router.post("/login", response_model=str)
async def login(
    credentials: auth_schemas.LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange email and password for a bare signed token string."""
    return auth_service.login(credentials.email, credentials.password)


@router.get("/auth/google")
async def google_login(request: Request):
    """Initiate Google OAuth2 login."""
    redirect_uri = request.url_for("google_callback")
    return await oauth.google.authorize_redirect(request, str(redirect_uri))


@router.get("/auth/google/callback", name="google_callback")
async def google_callback(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Finish the Google handshake and hand the token to the front-end."""
    try:
        token = await oauth.google.authorize_access_token(request)
    except OAuthError as e:
        LetsGoLogger.warning(f"Google OAuth failed: {e.error}")
        return _frontend_redirect("/login")

    user_info = token.get("userinfo")
    google_data = extract_user_info_google(user_info or {})
    if not google_data["email"] or not google_data["google_id"]:
        LetsGoLogger.warning("Google OAuth returned no email or subject")
        return _frontend_redirect("/login")

    user = auth_service.upsert_google_user(google_data)
    access_token = create_access_token(user.id)
    return _frontend_redirect(f"/oauth-callback?token={access_token}")
