"""Logging configuration for the netglance application."""

import logging
import os
import sys

from netglance.log_rotation import HeadTailFileHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    log_file: str | None = None,
    head_lines: int = 200,
    tail_lines: int = 200,
    check_every: int = 100,
) -> HeadTailFileHandler | None:
    """Configure application-wide logging.

    Respects NETGLANCE_LOG_LEVEL environment variable (default: INFO).
    Logs to stderr with timestamp, level, module name, and message, and
    additionally appends to log_file when one is given. The file handler
    is returned so the scheduler can bound the file's size.

    Environment Variables:
        NETGLANCE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                             Default is INFO.

    Examples:
        # Debug level for troubleshooting
        $ NETGLANCE_LOG_LEVEL=DEBUG python -m netglance

        # No log file, stderr only
        $ NETGLANCE_LOG_FILE= python -m netglance
    """
    log_level_str = os.environ.get("NETGLANCE_LOG_LEVEL", "INFO").upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_level_map.get(log_level_str, logging.INFO)

    handlers = [logging.StreamHandler(sys.stderr)]
    file_handler = None
    if log_file:
        file_handler = HeadTailFileHandler(
            log_file,
            head_lines=head_lines,
            tail_lines=tail_lines,
            check_every=check_every,
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.info(
        "Logging configured: level=%s, file=%s",
        logging.getLevelName(log_level),
        log_file or "(none)",
    )
    return file_handler
