import uvicorn

from shared_todos.config import get_settings


def main():
    """Serve the app on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "shared_todos.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
