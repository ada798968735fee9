import sys
import logging
from typing import Any

from loguru import logger

from betnorm.config.settings import settings


def sensitive_data_filter(record: dict[str, Any]) -> bool:
    """Filter function to mask sensitive data in log records."""
    sensitive_keys = ["key", "token", "password", "secret"]

    if record.get("extra"):
        for extra_key, value in record["extra"].items():
            if any(sk in extra_key.lower() for sk in sensitive_keys):
                if isinstance(value, str) and len(value) > 8:
                    record["extra"][extra_key] = value[:4] + "****" + value[-4:]
                else:
                    record["extra"][extra_key] = "********"

    # The Supabase key is the only credential this service handles
    if settings.supabase_key and settings.supabase_key in record["message"]:
        record["message"] = record["message"].replace(settings.supabase_key, "********")

    return True  # Keep the record after filtering/masking


class InterceptHandler(logging.Handler):
    """Routes standard logging records (httpx, supabase) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
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


def setup_logging(level: str | None = None) -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    effective_level = (level or settings.log_level).upper()
    logger.add(
        sys.stderr,
        level=effective_level,
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

    logger.debug(f"Logging initialized with level: {effective_level}")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug("Standard logging intercepted.")
