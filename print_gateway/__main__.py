"""Run the print gateway: ``python -m print_gateway``."""

import logging

import uvicorn

from .core.config import settings

LOGGER = logging.getLogger("print-gateway")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def run() -> None:
    configure_logging(settings.LOG_LEVEL)
    LOGGER.info("Print service listening at http://%s:%s (API key: set PRINT_API_KEY)", settings.BIND_HOST, settings.PORT)
    uvicorn.run(
        "print_gateway.main:app",
        host=settings.BIND_HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":  # pragma: no cover
    run()
