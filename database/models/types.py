"""
Column types shared by the statistics schema.
"""
import datetime
from typing import Optional, Union

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def to_datetime(value: Union[int, float, str, datetime.datetime, None]) -> Optional[datetime.datetime]:
    """
    Normalize a stored timestamp into an aware UTC datetime.

    The statistics mod writes epoch milliseconds, but older exports and some
    MySQL schemas hand back ISO strings or native DATETIME values.
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)
    if isinstance(value, (int, float)):
        return EPOCH + datetime.timedelta(milliseconds=value)

    text = str(value).strip()
    if not text:
        return None
    if text.lstrip("-").isdigit():
        return EPOCH + datetime.timedelta(milliseconds=int(text))
    parsed = datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))
    return to_datetime(parsed)


def to_epoch_millis(value: datetime.datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return int((value - EPOCH) / datetime.timedelta(milliseconds=1))


class EpochMillis(TypeDecorator):
    """Timestamp stored as epoch milliseconds, read back as an aware datetime."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or isinstance(value, int):
            return value
        if isinstance(value, datetime.datetime):
            return to_epoch_millis(value)
        return to_epoch_millis(to_datetime(value))

    def process_result_value(self, value, dialect):
        return to_datetime(value)
