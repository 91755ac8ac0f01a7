import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


class LoggingConfig:
    """Process-wide loguru sinks for the API host."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_file: Optional[Union[str, Path]] = None,
        log_to_console: bool = True,
    ):
        self.log_level = log_level.upper()
        self.log_file = Path(log_file) if log_file else None
        self.log_to_console = log_to_console

        self._configure_logger()

    def _configure_logger(self):
        """Configure loguru logger with custom settings."""
        # Remove default logger
        logger.remove()

        if self.log_to_console:
            logger.add(
                sys.stderr,
                format=CONSOLE_FORMAT,
                level=self.log_level,
                colorize=True,
                backtrace=True,
                diagnose=False,
            )

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                self.log_file,
                format=FILE_FORMAT,
                level=self.log_level,
                rotation="10 MB",
                retention="7 days",
                compression="zip",
                enqueue=True,
            )


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_to_console: bool = True,
) -> LoggingConfig:
    """Quick setup for logging configuration."""
    return LoggingConfig(log_level=log_level, log_file=log_file, log_to_console=log_to_console)