"""Application configuration."""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from flownlp.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = Field(default="FlowNLP")

    # Server settings
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080, ge=1, le=65535)

    # Authentication settings
    API_KEY: str = Field(...)

    # CORS settings
    CORS_ORIGINS: list[str] = Field(default=["*"])
    CORS_METHODS: list[str] = Field(default=["GET", "POST", "OPTIONS"])
    CORS_HEADERS: list[str] = Field(default=["Content-Type", "Authorization"])

    # Environment
    LOG_LEVEL: str = Field(default="INFO")
    DEBUG: bool = Field(default=False)


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process.

    Raises:
        ConfigurationError: If the environment does not provide a valid
            configuration (most commonly a missing API_KEY).
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = [".".join(str(loc) for loc in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            "Error loading configuration", details={"fields": missing}
        ) from e
