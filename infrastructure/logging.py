"""Application logging (loguru) and the per-user data directories it writes to."""

from __future__ import annotations

from pathlib import Path
import sys

from loguru import logger

APP_DIR_NAME = "SwipeTriage"


def get_app_data_directory() -> Path:
    """Per-user data directory holding logs and delete audit logs."""
    return Path.home() / ".local" / "share" / APP_DIR_NAME


def get_log_directory() -> str:
    return str(get_app_data_directory() / "logs")


def get_delete_log_directory() -> str:
    return str(get_app_data_directory() / "delete_logs")


def init_logging(log_dir: str | None = None, level: str = "INFO", console: bool = True) -> Path:
    """Route loguru output to a daily, size-rotated file under `log_dir`.

    Warnings and errors are mirrored to stderr when `console` is set.
    Returns the directory the log files are written to.
    """
    target = Path(log_dir or get_log_directory())
    target.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(target / "app_{time:YYYYMMDD}.log"),
        level=level,
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        # Deletion runs on worker threads
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )
    if console:
        logger.add(sys.stderr, level="WARNING")
    return target
