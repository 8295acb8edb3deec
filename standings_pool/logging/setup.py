import sys
import logging
from typing import Any

from loguru import logger

from standings_pool.config.settings import settings

SENSITIVE_KEYS = ["key", "token", "password", "secret", "authorization"]


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "****" + value[-4:]
    return "********"


def sensitive_data_filter(record: dict[str, Any]) -> bool:
    """Filter function to mask sensitive data in log records."""

    # Mask string values stored under secret-looking keys in 'extra'
    extra = record.get("extra")
    if isinstance(extra, dict):
        for extra_key, value in list(extra.items()):
            if any(sk in extra_key.lower() for sk in SENSITIVE_KEYS) and isinstance(
                value, str
            ):
                extra[extra_key] = _mask(value)

    # Configured secrets never reach the sink verbatim
    for secret in (settings.supabase_key, settings.supabase_service_key):
        if secret and secret in record["message"]:
            record["message"] = record["message"].replace(secret, "********")

    return True  # Keep the record after filtering/masking


class InterceptHandler(logging.Handler):
    """Routes stdlib logging records (httpx, postgrest) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


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

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.info("Standard logging intercepted.")
