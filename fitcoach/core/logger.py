"""Loguru setup for the fitcoach client and CLI.

Not configured on import: library users keep loguru's defaults until the
CLI (or their own code) calls setup_logger.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

    from fitcoach.config.settings import Settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

_SECRET_PATTERNS = (
    re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+"),
    re.compile(r"""(["']?(?:accessToken|password|newPassword)["']?\s*[:=]\s*["']?)[^"',\s}]+"""),
)


def redact_secrets(record: Record) -> None:
    """Mask bearer tokens and password fields that slip into a log message."""
    message = record["message"]
    for pattern in _SECRET_PATTERNS:
        message = pattern.sub(r"\1***", message)
    record["message"] = message


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default handler with the fitcoach sinks.

    Args:
        level: Minimum level for every sink
        log_file: Optional path for a rotating, zipped file sink
        rotation: File rotation trigger (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept (e.g., "7 days")
    """
    logger.remove()
    logger.configure(patcher=redact_secrets)

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
        )

    logger.debug(f"[LOGGING] Initialized (level={level}, file={log_file or 'none'})")


def setup_logger_from_settings(settings: Settings, *, debug: bool = False) -> None:
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=settings.log_file or None)
