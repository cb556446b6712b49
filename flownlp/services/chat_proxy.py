"""Chat proxy service forwarding validated requests to the Ollama backend."""

import asyncio
import json
from typing import Any

import httpx
from pydantic import ValidationError

from flownlp.core.exceptions import (
    BackendUnreachable,
    BadRequest,
    GatewayTimeout,
    InternalError,
)
from flownlp.core.logging import setup_logger
from flownlp.models.chat import ChatRequest, ChatResponse

logger = setup_logger(__name__)

OLLAMA_CHAT_URL = "http://localhost:11434/api/chat"
FORWARD_TIMEOUT_SECONDS = 90.0

_decoder = json.JSONDecoder()


def decode_first_value(raw: bytes) -> Any:
    """
    Decode the first JSON value in ``raw`` and ignore anything after it.

    A streamed (NDJSON) backend reply therefore yields its first chunk.

    Raises:
        ValueError: If the bytes are not UTF-8 or do not start with a JSON value.
    """
    text = raw.decode("utf-8").lstrip()
    value, _ = _decoder.raw_decode(text)
    return value


class ChatProxyService:
    """Validates chat requests and relays them to the backend under a deadline."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        backend_url: str = OLLAMA_CHAT_URL,
        timeout_seconds: float = FORWARD_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize the chat proxy service.

        Args:
            client: HTTP client used for the single backend call
            backend_url: Backend chat endpoint
            timeout_seconds: Deadline for the backend call, including reading its body
        """
        self.client = client
        self.backend_url = backend_url
        self.timeout_seconds = timeout_seconds

    def parse_request(self, body: bytes, client_ip: str) -> ChatRequest:
        """
        Decode and check an inbound request body.

        Args:
            body: Raw request body
            client_ip: Caller address, for logging

        Returns:
            ChatRequest: The decoded request, unchanged

        Raises:
            BadRequest: If the body does not decode or is missing required fields
        """
        try:
            chat_request = ChatRequest.model_validate(decode_first_value(body))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Invalid request payload from {client_ip}: {e}")
            raise BadRequest("Invalid request payload")

        if not chat_request.is_complete():
            logger.warning(f"Missing required fields in request from {client_ip}")
            raise BadRequest("Missing required fields")

        logger.info(
            f"Request sent: Model: {chat_request.model}, Messages: {chat_request.messages}"
        )
        return chat_request

    def serialize(self, chat_request: ChatRequest) -> str:
        """Encode the request body sent to the backend."""
        return json.dumps(chat_request.model_dump(mode="json"))

    async def forward(self, chat_request: ChatRequest, client_ip: str) -> ChatResponse:
        """
        Send the request to the backend once and decode its reply.

        The deadline covers both the call and the body read; when it elapses the
        in-flight call is cancelled.

        Args:
            chat_request: Validated request
            client_ip: Caller address, for logging

        Returns:
            ChatResponse: The backend reply

        Raises:
            InternalError: If the request cannot be serialized or the reply cannot be decoded
            GatewayTimeout: If the backend does not answer before the deadline
            BackendUnreachable: On any other transport failure
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds

        try:
            payload = self.serialize(chat_request)
        except (TypeError, ValueError) as e:
            logger.error(f"Error creating request body from {client_ip}: {e}")
            raise InternalError("Error creating request")

        request = self.client.build_request(
            "POST",
            self.backend_url,
            content=payload,
            headers={"Content-Type": "application/json"},
        )

        try:
            response = await asyncio.wait_for(
                self.client.send(request, stream=True),
                timeout=max(deadline - loop.time(), 0.0),
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.error(f"Request timed out from {client_ip}")
            raise GatewayTimeout()
        except httpx.HTTPError as e:
            logger.error(f"Error contacting Ollama API from {client_ip}: {e}")
            raise BackendUnreachable()

        try:
            remaining = max(deadline - loop.time(), 0.0)
            raw = await asyncio.wait_for(response.aread(), timeout=remaining)
            chat_response = ChatResponse.model_validate(decode_first_value(raw))
        except (asyncio.TimeoutError, httpx.HTTPError, ValueError, ValidationError) as e:
            logger.error(f"Error reading Ollama response from {client_ip}: {e}")
            raise InternalError("Error reading Ollama response")
        finally:
            await response.aclose()

        logger.info(
            f"Response received from {client_ip}: Model: {chat_response.model}, "
            f"Message: {chat_response.message}, Done: {chat_response.done}"
        )
        return chat_response
