import uvicorn

from goout_calendar.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "goout_calendar.main:app",
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    main()
