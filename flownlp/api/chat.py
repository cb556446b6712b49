"""Chat proxy API endpoint."""

import asyncio

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from flownlp.core.auth import client_address
from flownlp.core.logging import setup_logger
from flownlp.dependencies.get_chat_proxy_service import get_chat_proxy_service
from flownlp.services.chat_proxy import ChatProxyService

logger = setup_logger(__name__)

router = APIRouter(tags=["chat"], prefix="/api")

# Response status for callers that hung up before the reply was ready.
CLIENT_CLOSED_REQUEST = 499


async def wait_for_disconnect(request: Request) -> None:
    """Block until the caller's connection reports ``http.disconnect``."""
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


@router.post("/chat", status_code=status.HTTP_200_OK)
async def chat(
    request: Request,
    chat_proxy: ChatProxyService = Depends(get_chat_proxy_service),
) -> Response:
    """
    Relay a chat request to the Ollama backend.

    This endpoint:
    1. Decodes the body and checks that model and messages are present
    2. Forwards the request once to the backend under a 90 second deadline
    3. Returns the backend reply unchanged

    The backend call is cancelled if the caller disconnects first.
    """
    client_ip = client_address(request)
    body = await request.body()
    chat_request = chat_proxy.parse_request(body, client_ip)

    forward_task = asyncio.ensure_future(chat_proxy.forward(chat_request, client_ip))
    disconnect_task = asyncio.ensure_future(wait_for_disconnect(request))
    try:
        done, _ = await asyncio.wait(
            {forward_task, disconnect_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        disconnect_task.cancel()
        if not forward_task.done():
            forward_task.cancel()

    if forward_task not in done:
        logger.warning(f"Client {client_ip} disconnected before response")
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    chat_response = forward_task.result()
    return JSONResponse(content=chat_response.model_dump(mode="json", exclude_unset=True))
