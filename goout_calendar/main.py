# goout_calendar/main.py
from fastapi import FastAPI

from goout_calendar.api.routes import calendar, health, index
from goout_calendar.core.config import get_settings
from goout_calendar.core.logging_config import setup_logging


def create_app() -> FastAPI:
    """
    Application factory for the GoOut Calendar Exporter.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Proxy web service that serves events liked by a GoOut.net user as an\n"
            "iCalendar feed, with optional splitting or aggregation of long-term\n"
            "(multi-day) events."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(index.router)
    app.include_router(health.router)
    app.include_router(calendar.router)

    return app


app = create_app()
