"""Loguru setup for the CRM service.

Services log through ``loguru.logger``; stdlib records from uvicorn,
SQLAlchemy, httpx and alembic are forwarded to it by ``_InterceptHandler``.

Environment:
    LOG_LEVEL   minimum level (default INFO)
    APP_ENV     "production" switches stdout to JSON lines
    LOG_FILE    optional rotating JSON file, production only
"""

import logging
import os
import sys

from loguru import logger

DEV_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)

# Only WARNING and above from these reach loguru
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine")


def _add_production_sinks(level: str) -> None:
    logger.add(sys.stdout, level=level, format="{message}", serialize=True)
    log_file = os.getenv("LOG_FILE")
    if log_file:
        logger.add(
            log_file,
            level=level,
            rotation="50 MB",
            retention="7 days",
            compression="gz",
            serialize=True,
        )


def setup_logging() -> None:
    """Replace loguru's default sink and route stdlib logging into it. Idempotent."""
    logger.remove()

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    is_production = os.getenv("APP_ENV", "").lower() == "production"

    if is_production:
        _add_production_sinks(log_level)
    else:
        logger.add(sys.stdout, level=log_level, format=DEV_FORMAT, colorize=True)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging configured", level=log_level, production=is_production)


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # depth past logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
