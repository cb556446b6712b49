"""FastAPI dependency injection functions."""

from .get_chat_proxy_service import get_chat_proxy_service, get_http_client

__all__ = [
    "get_chat_proxy_service",
    "get_http_client",
]
