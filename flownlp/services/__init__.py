"""Business logic services."""

from .chat_proxy import ChatProxyService

__all__ = ["ChatProxyService"]
