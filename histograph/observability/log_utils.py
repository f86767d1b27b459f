"""
Log helpers for mutation records.

Records routed through the storage layer carry the raw upstream payload under
"data" and may carry large geometries. These helpers reduce a record to the
handful of identifying fields worth putting on a log line.

Dependencies: logging (stdlib), histograph.core.tokens
System role: Structured logging context for routed records
"""

import logging
from typing import Any, Mapping

from histograph.core.tokens import General

_CONTEXT_TOKENS = (
    General.HGID,
    General.ACTION,
    General.TYPE,
    General.TARGET,
    General.SOURCEID,
)


def shorten(value: Any, max_length: int = 120) -> str:
    """
    Render a field value for a log line, cutting it at max_length characters.

    Args:
        value: Field value (None renders as "-")
        max_length: Longest rendering kept intact

    Returns:
        str: Printable value
    """
    if value is None:
        return "-"
    text = value if isinstance(value, str) else repr(value)
    if len(text) > max_length:
        return f"{text[:max_length]}...<{len(text)} chars>"
    return text


def record_context(record: Mapping[str, Any]) -> dict[str, str]:
    """
    Pick the identifying fields of a record for use as logging extra.

    The raw payload is reduced to its size; it is never logged verbatim.
    """
    context = {token.value: shorten(record.get(token.value)) for token in _CONTEXT_TOKENS}
    data = record.get(General.DATA.value)
    if data is not None:
        context["data_size"] = str(len(data) if isinstance(data, str) else len(repr(data)))
    return context


def log_record(
    logger: logging.Logger,
    level: int,
    message: str,
    record: Mapping[str, Any],
    **extra: Any,
) -> None:
    """
    Log a message about one record with its identifying fields attached.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        record: Field map the message is about
        **extra: Additional context, shortened like record fields
    """
    context = record_context(record)
    context.update({key: shorten(value) for key, value in extra.items()})
    logger.log(level, message, extra=context)
