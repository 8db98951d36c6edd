"""
Logging helpers shared by the engine, the GitHub client and the CLI.
"""
import logging
from typing import Optional

LOGGER_NAME = 'profile_advisor'


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the profile_advisor hierarchy."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """Attach a console handler (and optional file handler) to the package logger.

    Safe to call more than once; existing handlers are replaced so repeated CLI runs
    in the same process do not duplicate output.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter('[advisor] %(levelname)s %(message)s'))
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        logger.addHandler(file_handler)

    return logger
