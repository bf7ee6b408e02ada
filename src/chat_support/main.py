"""Run the chat support service under uvicorn."""
import uvicorn

from chat_support.api.app import create_app
from chat_support.config.settings import get_settings
from chat_support.infrastructure.observability.logging import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
