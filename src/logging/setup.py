import logging
import sys
from typing import Any

from loguru import logger

from src.config.settings import settings

MASK = "********"


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "****" + value[-4:]
    return MASK


def sensitive_data_filter(record: dict[str, Any]) -> bool:
    """Filter function to mask the data source token in log records."""
    sensitive_keys = ["key", "token", "password", "secret", "authorization"]

    extra = record.get("extra")
    if isinstance(extra, dict):
        for extra_key, value in extra.items():
            if any(sk in extra_key.lower() for sk in sensitive_keys):
                extra[extra_key] = _mask(value) if isinstance(value, str) else MASK

    token = settings.data_source_token
    if token and token in record["message"]:
        record["message"] = record["message"].replace(token, MASK)

    return True  # Keep the record after masking


def setup_logging() -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=sensitive_data_filter,
    )

    logger.info(f"Logging initialized with level: {settings.log_level}")

    # Intercept standard logging messages (httpx logs through it)
    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

            # Find caller from where originated the logged message
            frame, depth = logging.currentframe(), 2
            while frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1

            logger.opt(depth=depth, exception=record.exc_info).log(
                level, record.getMessage()
            )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug("Standard logging intercepted.")
