# goout_calendar/core/config.py
from functools import lru_cache

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime (and from an
    optional `.env` file next to the working directory).

    These settings are used for:
    - Upstream GoOut API location and request parameters
    - HTTP timeouts and the pagination cap
    - Logging verbosity
    - Server bind address
    - Calendar metadata (PRODID)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    APP_NAME: str = "GoOut Calendar Exporter"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")
    LOG_LEVEL: str = Field("INFO", description="Root logging level.")

    # --- Server ---
    HOST: str = Field("127.0.0.1", description="Interface uvicorn binds to.")
    PORT: int = Field(8000, ge=1, le=65535, description="Port uvicorn listens on.")

    # --- Upstream GoOut API ---
    GOOUT_BASE_URL: AnyHttpUrl = Field(
        "https://goout.net",
        description="Scheme and host of the GoOut API.",
    )
    GOOUT_SOURCE: str = Field(
        "goout.strohel.eu",
        description="Value of the `source` query parameter sent with every page request.",
    )
    GOOUT_TIMEOUT_SECONDS: float = Field(
        10.0,
        description="Timeout applied to each page request.",
    )
    GOOUT_MAX_PAGES: int = Field(
        255,
        ge=1,
        description="Upper bound on the number of pages fetched for one calendar.",
    )

    ICS_PRODID: str = Field(
        "-//goout-calendar//GoOut Calendar Exporter//EN",
        description="PRODID written into every generated calendar.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
