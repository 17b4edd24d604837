"""
Main FastAPI application for WikiStack.
"""

import os
import secrets
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from fastapi_csrf_protect import CsrfProtect
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger
from .config import (
    APP_DESCRIPTION,
    LOG_DIR,
    LOG_LEVEL,
    LOG_RETENTION,
    NAME,
    STATIC_DIR,
)
from .database import db_instance, init_database
from .routes.web import pages, search, user
from .routes.api import pages as api_pages
from .middleware.security_headers import SecurityHeadersMiddleware
from .middleware.request_logging import RequestLoggingMiddleware
from .utils.error_utils import describe_validation_error, render_error_page

# Configure loguru
os.makedirs(LOG_DIR, exist_ok=True)
logger.add(
    os.path.join(LOG_DIR, "wikistack.log"),
    rotation="1 day",
    retention=LOG_RETENTION,
    level=LOG_LEVEL,
)
logger.add(
    os.path.join(LOG_DIR, "errors.log"),
    rotation="1 day",
    retention=LOG_RETENTION,
    level="ERROR",
)


class CsrfSettings(BaseSettings):
    """CSRF cookie settings, read from CSRF_* environment variables."""

    secret_key: str = ""
    cookie_key: str = "wikistack-csrf-token"
    cookie_samesite: str = "lax"
    # Set CSRF_COOKIE_SECURE=true in production so the cookie only travels over HTTPS
    cookie_secure: bool = False
    httponly: bool = True
    # The add-page form posts the token as a regular field
    token_location: str = "body"
    token_key: str = "csrf_token"

    model_config = SettingsConfigDict(env_prefix="CSRF_")


@CsrfProtect.load_config
def get_csrf_config() -> CsrfSettings:
    settings = CsrfSettings()
    if not settings.secret_key:
        settings.secret_key = secrets.token_urlsafe(64)
        logger.warning(
            "CSRF_SECRET_KEY not set; generated ephemeral secret key for this process"
        )
    logger.info(
        f"CSRF config: secure={settings.cookie_secure}, httponly={settings.httponly}"
        f", samesite={settings.cookie_samesite}, key={settings.cookie_key}"
    )
    return settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await init_database()
        logger.info("WikiStack application started successfully")
    except Exception as e:
        logger.error(f"Error during application startup: {str(e)}")
    yield
    await db_instance.disconnect()
    logger.info("WikiStack application stopped")


# Create FastAPI app
app = FastAPI(title=NAME, description=APP_DESCRIPTION, lifespan=lifespan)

logger.info(f"Wiki Name is {NAME}")

# Mount static files
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# search must be registered before pages so /wiki/search is not read as a url_title
app.include_router(search.router)
app.include_router(pages.router)
app.include_router(user.router)
# API routes
app.include_router(api_pages.router, prefix="/api")


@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    if request.url.path.startswith("/api/"):
        return await http_exception_handler(request, exc)
    if exc.status_code == 404:
        return render_error_page(
            request,
            title="404 Not Found",
            message="The page you’re looking for doesn’t exist or has been moved.",
            status_code=404,
        )
    return render_error_page(
        request,
        title=f"{exc.status_code} Error",
        message=str(exc.detail),
        status_code=exc.status_code,
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    errors = describe_validation_error(exc)
    logger.warning(f"Validation failed on {request.url.path}: {errors}")
    return render_error_page(
        request,
        title="Invalid input",
        message="Some fields did not pass validation.",
        status_code=422,
        errors=errors,
    )


if __name__ == "__main__":
    import uvicorn
    from .config import HOST, PORT, DEV

    uvicorn.run(app, host=HOST, port=PORT, reload=DEV)
