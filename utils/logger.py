"""
Logging configuration for the application.
"""
import logging
import sys

from config import Config


class ColoredFormatter(logging.Formatter):
    """Custom formatter with log levels."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors, leaving the record itself untouched."""
        levelname = record.levelname
        color = self.COLORS.get(levelname, self.RESET)
        record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logger(name: str, level: int | str = logging.INFO) -> logging.Logger:
    """
    Set up a logger that writes colored records to stdout.

    Args:
        name: Logger name
        level: Logging level (int or level name such as "DEBUG")

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        level = logging.getLevelName(level)
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = ColoredFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    return logger


app_logger = setup_logger("flick_bridge", Config.LOG_LEVEL)
