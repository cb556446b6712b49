"""Dependency injection functions for the chat proxy service."""

import httpx
from fastapi import Depends, Request

from flownlp.services.chat_proxy import ChatProxyService


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the HTTP client created in the application lifespan."""
    return request.app.state.http_client


def get_chat_proxy_service(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> ChatProxyService:
    """Get chat proxy service instance with injected HTTP client."""
    return ChatProxyService(client=client)
