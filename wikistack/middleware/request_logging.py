"""
Request logging middleware for WikiStack.
Logs every request and flags error responses.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from loguru import logger

from .. import config


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log method, path, client and timing for all requests."""

    async def dispatch(self, request: Request, call_next):
        user_agent = request.headers.get("user-agent", "unknown")

        client_ip = "unknown"
        if request.client:
            client_ip = request.client.host

        method = request.method
        path = request.url.path

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        if config.REQUEST_LOGGING_ENABLED:
            logger.info(
                f"Request: {method} {path} -> {response.status_code} "
                f"({elapsed_ms:.1f} ms) | Client: {client_ip} | User-Agent: {user_agent}"
            )

        if 400 <= response.status_code < 600:
            logger.warning(
                f"Response: {response.status_code} {method} {path} | "
                f"Client: {client_ip} | "
                f"User-Agent: {user_agent}"
            )

        return response
