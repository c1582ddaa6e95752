"""Logging setup for the job board."""

import logging
from pathlib import Path
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_dir: Union[str, Path] = "logs") -> logging.Logger:
    """Configure and return the `jobboard` logger.

    Creates the logs directory if it doesn't exist. Records go to the
    console; ERROR records are also written to `jobboard_errors.log`.

    Args:
        level: Log level name for the `jobboard` logger.
        log_dir: Directory for the error log file.

    Returns:
        Configured logger instance.
    """
    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("jobboard")
    logger.setLevel(level)

    # Avoid duplicate handlers if logger already configured
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        file_handler = logging.FileHandler(logs_dir / "jobboard_errors.log")
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
