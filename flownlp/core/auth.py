"""Authentication middleware and utilities."""

import secrets

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from flownlp.core.exceptions import Unauthorized, error_response
from flownlp.core.logging import setup_logger

logger = setup_logger(__name__)

AUTHORIZATION_HEADER = b"authorization"


def client_address(request: Request) -> str:
    """Network origin of the caller as ``host:port``."""
    if request.client is None:
        return "unknown"
    return f"{request.client.host}:{request.client.port}"


def authorization_header(request: Request) -> bytes:
    """Raw bytes of the first Authorization header, or empty when absent."""
    for name, value in request.headers.raw:
        if name.lower() == AUTHORIZATION_HEADER:
            return value
    return b""


def is_authorized(header_value: bytes, api_key: str) -> bool:
    """Byte-exact, constant-time check of an Authorization header value."""
    expected = f"Bearer {api_key}".encode("utf-8")
    return secrets.compare_digest(header_value, expected)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to check for the configured bearer credential."""

    def __init__(self, app: ASGIApp, api_key: str):
        super().__init__(app)
        self.api_key = api_key
        # Endpoints that require authentication
        self.protected_paths = {"/api/chat"}

    async def dispatch(self, request: Request, call_next):
        """Process the request and check authentication."""
        if request.url.path not in self.protected_paths:
            return await call_next(request)

        client_ip = client_address(request)
        logger.info(f"Received request from {client_ip} on {request.url.path}")

        auth_header = authorization_header(request)
        if not is_authorized(auth_header, self.api_key):
            logger.warning(f"Unauthorized request from {client_ip}")
            return error_response(Unauthorized())

        return await call_next(request)
