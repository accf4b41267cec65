"""
Application configuration using Pydantic BaseSettings.

Secrets and external endpoints are required: the process refuses to start
without them instead of issuing tokens or links that cannot work.
"""

from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Let's Go Party API"
    app_version: str = "1.0.0"
    environment: str = Field(default="development")
    debug: bool = False

    # Database
    database_url: str = Field(default="sqlite:///./letsgo.db")

    # CORS
    cors_origins: Union[str, List[str]] = Field(default=["*"])

    @field_validator("cors_origins", mode="after")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [v]
        return v

    # Logging
    log_level: str = Field(default="INFO")

    # Session tokens
    jwt_secret: str = Field(..., min_length=1)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_days: int = Field(default=5)

    # Single-use tokens
    verification_token_ttl_minutes: int = Field(default=60)
    reset_token_ttl_minutes: int = Field(default=60)

    # Mail
    email_user: str = Field(..., min_length=1)
    email_password: str = Field(..., min_length=1)
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=465)
    contact_inbox: Optional[str] = None

    # OAuth
    google_client_id: str = Field(..., min_length=1)
    google_client_secret: str = Field(..., min_length=1)

    # Public URLs
    frontend_url: str = Field(..., min_length=1)
    public_api_url: str = Field(default="http://localhost:8000")

    # Uploaded files
    assets_dir: str = Field(default="assets")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def contact_address(self) -> str:
        """Inbox receiving contact form messages."""
        return self.contact_inbox or self.email_user


# Global settings instance
settings = Settings()
