"""
Logging Configuration
Sets up the 'spherepack' logger for the command line entry points.

Results go to files or stdout, so log records default to stderr.
"""
import logging
import sys
from typing import Optional, TextIO

from spherepack.core.errors import SpherePackIOError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configures the 'spherepack' logger and returns it.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write logs to (overwritten).
        stream: Console stream, sys.stderr if None.

    Raises:
        SpherePackIOError: log_file cannot be opened for writing.
    """
    logger = logging.getLogger("spherepack")
    logger.setLevel(level)

    # Repeated calls (tests, batch runs) must not stack handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        except OSError as exc:
            raise SpherePackIOError(f"failed to open log file {log_file}: {exc}") from exc
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized at %s.", logging.getLevelName(level))
    return logger
