"""
Logger configuration.

Configures a stdout handler whose lines carry the hgid of the record being
processed, when the log call supplied one (see log_utils.log_record).

Dependencies: logging (stdlib), histograph.configs
System role: Centralized logging configuration
"""

import logging
import sys
from typing import TextIO

from histograph.configs import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(hgid)s] %(message)s"


class HgidFilter(logging.Filter):
    """Give every record an hgid attribute so LOG_FORMAT never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "hgid"):
            record.hgid = "-"
        return True


def configure_logging(level: str | None = None, stream: TextIO | None = None) -> logging.Handler:
    """
    Install the histograph handler on the root logger.

    Args:
        level: Root log level name (None uses the LOG_LEVEL setting)
        stream: Output stream (defaults to stdout)

    Returns:
        logging.Handler: The installed handler
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.addFilter(HgidFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    root_logger.setLevel((level or get_settings().log_level).upper())
    root_logger.addHandler(handler)

    # Per-request chatter from the HTTP and SQL layers
    for noisy in ("httpx", "httpcore", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return handler
