"""Application starter."""

import sys

import uvicorn

from flownlp.core.config import get_settings
from flownlp.core.exceptions import ConfigurationError
from flownlp.core.logging import setup_logger

logger = setup_logger("flownlp.run")

if __name__ == "__main__":
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.critical(f"{e.message}: {e.details}")
        sys.exit(1)

    logger.info(f"{settings.APP_NAME} server running on port {settings.PORT}")

    # Start the app
    uvicorn.run(
        "flownlp.main:create_application",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
