"""Shared utility functions for qdavault."""

from qdavault.utils.datetime_parsing import parse_optional_timestamp, parse_timestamp
from qdavault.utils.error_handling import describe_record, transaction_rollback

__all__ = [
    "describe_record",
    "parse_optional_timestamp",
    "parse_timestamp",
    "transaction_rollback",
]
