"""Custom exception classes and the handlers that render them."""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse


class FlowNLPException(Exception):
    """Base exception for the FlowNLP gateway."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(FlowNLPException):
    """Startup configuration could not be loaded."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, status_code=500, details=details)


class Unauthorized(FlowNLPException):
    """Caller did not present the configured bearer credential."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class BadRequest(FlowNLPException):
    """Request body could not be decoded or is incomplete."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class InternalError(FlowNLPException):
    """Local failure while building the backend call or decoding its reply."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details
        )


class GatewayTimeout(FlowNLPException):
    """Backend did not answer before the forwarding deadline."""

    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message, status_code=status.HTTP_504_GATEWAY_TIMEOUT)


class BackendUnreachable(FlowNLPException):
    """Backend transport failure other than a timeout."""

    def __init__(self, message: str = "Error contacting Ollama API") -> None:
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(exc: FlowNLPException) -> PlainTextResponse:
    """Render an exception as the plain-text error body callers expect."""
    return PlainTextResponse(
        content=exc.message + "\n",
        status_code=exc.status_code,
        headers={"X-Content-Type-Options": "nosniff"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the gateway's exception handlers on the FastAPI app."""

    @app.exception_handler(FlowNLPException)
    async def handle_flownlp_exception(
        _request: Request, exc: FlowNLPException
    ) -> PlainTextResponse:
        return error_response(exc)
