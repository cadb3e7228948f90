import logging
import structlog

from murajaah.config import settings


def configure_logging(level: str = None, fmt: str = None) -> None:
    """Configure structlog for application-wide logging.

    Initialises stdlib logging at the configured level and sets up structlog
    with ISO timestamps. Output is JSON by default so review events can be
    shipped to a log collector; ``console`` gives a readable local format.
    """
    level_name = (level or settings.log_level).upper()
    renderer_name = (fmt or settings.log_format).lower()

    logging.basicConfig(level=getattr(logging, level_name, logging.INFO))
    if renderer_name == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


logger = structlog.get_logger()
