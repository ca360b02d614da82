"""
Logging setup - Loguru as the single backend, stdlib logging routed into it.
"""
import logging
import sys

from loguru import logger

from pool_api.config import LOG_LEVEL


def setup_logging() -> None:
    """Configure Loguru sinks and intercept stdlib logging.

    Called once from the app lifespan hook and from scripts.
    """
    logger.remove()
    logger.add(
        sys.stdout,
        level=LOG_LEVEL,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "{message}"
        ),
    )

    # uvicorn and sqlalchemy log through stdlib
    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info("Logging configured at {}", LOG_LEVEL)


class _InterceptHandler(logging.Handler):
    """Route stdlib logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip frames from stdlib logging internals
        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
