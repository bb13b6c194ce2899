"""
Shared Schema Validators
Timestamps are stored as naive UTC
"""

from datetime import datetime, timezone
from typing import Iterable, Optional


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def reject_nulls(data, fields: Iterable[str]):
    """
    Refuse an explicit null for columns that cannot be NULL

    Partial updates leave a field out to keep it; sending null is an error.
    """
    if isinstance(data, dict):
        nulled = sorted(name for name in fields if name in data and data[name] is None)
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
    return data
