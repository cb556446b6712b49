"""Request and response models."""

from .chat import ChatRequest, ChatResponse, Message

__all__ = ["ChatRequest", "ChatResponse", "Message"]
