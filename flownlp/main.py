"""Main FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flownlp.api import chat
from flownlp.core.auth import AuthenticationMiddleware
from flownlp.core.config import Settings, get_settings
from flownlp.core.exceptions import register_exception_handlers
from flownlp.core.logging import configure_logging, setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {app.title} gateway, version={app.version}")

    # The forwarding deadline is the only bound on backend calls
    app.state.http_client = httpx.AsyncClient(timeout=None)

    yield

    # Shutdown
    logger.info(f"Shutting down {app.title} gateway")
    await app.state.http_client.aclose()


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Authenticated gateway in front of a local Ollama backend",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    # Authentication middleware (must be added before the CORS middleware)
    app.add_middleware(AuthenticationMiddleware, api_key=settings.API_KEY)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    register_exception_handlers(app)

    app.include_router(chat.router)

    return app
