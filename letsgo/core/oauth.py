"""
OAuth2 client for Google sign-in.
"""

from typing import Any, Dict, Optional

from authlib.integrations.starlette_client import OAuth
from starlette.config import Config

from letsgo.core.config import settings

config = Config()
oauth = OAuth(config)

oauth.register(
    name="google",
    client_id=settings.google_client_id,
    client_secret=settings.google_client_secret,
    client_kwargs={"scope": "openid email profile"},
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
)


def extract_user_info_google(user_info: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Normalize the OpenID userinfo returned by Google."""
    display_name = user_info.get("name") or ""
    name_parts = display_name.split(" ")

    return {
        "email": user_info.get("email"),
        "google_id": user_info.get("sub"),
        "name": user_info.get("given_name") or name_parts[0],
        "last_name": user_info.get("family_name") or " ".join(name_parts[1:]),
        "picture": user_info.get("picture"),
    }
