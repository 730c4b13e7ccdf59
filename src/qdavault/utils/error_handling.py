"""Error handling utilities for common exception patterns."""

from contextlib import contextmanager
from logging import getLogger
from typing import Any

import msgspec

from qdavault.constants import LOG_CONTEXT_MAX_CHARS, LOG_VALUE_MAX_CHARS

logger = getLogger(__name__)


@contextmanager
def transaction_rollback(conn):
    """Context manager for database transactions with automatic rollback on error.

    Args:
        conn: Database connection object with rollback() method

    Raises:
        Exception: Re-raises the exception after rollback

    Example:
        with transaction_rollback(conn):
            cursor.execute(...)
            conn.commit()
    """
    try:
        yield
    except Exception:
        conn.rollback()
        raise


def _abbreviate(value: Any, limit: int) -> Any:
    if isinstance(value, str) and len(value) > limit:
        return f"{value[:limit]}... ({len(value)} chars)"
    if isinstance(value, dict):
        return {key: _abbreviate(item, limit) for key, item in value.items()}
    if isinstance(value, list):
        return [_abbreviate(item, limit) for item in value]
    return value


def describe_record(
    record: Any,
    max_value_chars: int = LOG_VALUE_MAX_CHARS,
    max_chars: int = LOG_CONTEXT_MAX_CHARS,
) -> str:
    """Render a backup record for log context without dumping oversized payloads.

    Every field is kept, but long string values (typically source ``content``)
    are abbreviated and the whole rendering is capped.

    Args:
        record: Backup record (usually a dict)
        max_value_chars: Longest string value shown verbatim
        max_chars: Cap on the total rendering

    Returns:
        JSON-ish one-line description

    Example:
        logger.error(f"Source import failed: {e} | record={describe_record(source_data)}")
    """
    try:
        text = msgspec.json.encode(_abbreviate(record, max_value_chars)).decode()
    except (msgspec.EncodeError, TypeError):
        text = repr(record)

    if len(text) > max_chars:
        return f"{text[:max_chars]}... (truncated)"
    return text
