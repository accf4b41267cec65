"""
FastAPI application entrypoint.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

import letsgo.api.v1 as v1
from letsgo.core.config import settings
from letsgo.core.errors import AppError, ServerError
from letsgo.core.logger import LetsGoLogger
from letsgo.db.session import create_tables

fastapi_logger = LetsGoLogger.get_fastapi_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    fastapi_logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    create_tables()
    yield
    fastapi_logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Let's Go Party event listing API",
    lifespan=lifespan,
)


def _error_body(kind: str, message: str, detail=None, **extra):
    body = {"kind": kind, "message": message, **extra}
    if detail and not settings.is_production:
        body["error"] = detail
    return body


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, ServerError):
        fastapi_logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.kind, exc.message, exc.detail, **exc.extra),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "kind": "ValidationError",
            "message": "Invalid request",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    fastapi_logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(ServerError.kind, ServerError.default_message, str(exc)),
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Session middleware holds the OAuth2 state between redirect and callback
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.jwt_secret,
    max_age=3600,
    same_site="lax",
    https_only=settings.is_production,
)

# Uploaded images
assets_dir = Path(settings.assets_dir)
(assets_dir / "uploads" / "images").mkdir(parents=True, exist_ok=True)
app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")

# Routers
for router in [
    v1.auth_router,
    v1.account_router,
    v1.events_router,
    v1.contact_router,
    v1.profile_router,
    v1.my_events_router,
]:
    app.include_router(router)


@app.get("/")
def root():
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }
