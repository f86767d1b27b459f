"""
Observability module.

Provides logging configuration and record-aware logging helpers.
"""

from histograph.observability.logger import HgidFilter, configure_logging
from histograph.observability.log_utils import log_record, record_context, shorten

__all__ = ["HgidFilter", "configure_logging", "log_record", "record_context", "shorten"]
