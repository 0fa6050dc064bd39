# pet_ledger/utils/datetime_utils.py
"""
Central date/time helpers shared across the project.

Goals of this module:
1. One place for every time-related conversion
2. Firestore compatibility for stored timestamps
3. Consistent timezone handling (everything is UTC on the backend)
4. Uniform ISO parsing and formatting
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Union, Any
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """Centralized date/time utility class."""

    @staticmethod
    def now() -> datetime:
        """Current time as a UTC timezone-aware datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def today() -> date:
        """Today's date (UTC)."""
        return datetime.now(timezone.utc).date()

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        Parse an ISO formatted string into a UTC datetime.

        Supported formats:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00
        - 2024-01-15
        """
        try:
            if not iso_string:
                raise ValueError("Cannot parse an empty string")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)

            # naive values are assumed to be UTC
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)

            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime parse failed: {iso_string} - {e}")
            raise ValueError(f"Invalid ISO date format: {iso_string}")

    @staticmethod
    def parse_date_string(date_string: str) -> date:
        """
        Parse an ISO date string into a date object.

        Supported formats:
        - 2024-01-15
        - 2024-01-15T10:30:00Z

        Fragments such as "5" or "12" are rejected rather than completed
        from the current date.
        """
        try:
            if not date_string:
                raise ValueError("Cannot parse an empty string")

            if 'T' in date_string:
                return DateTimeUtils.parse_iso_datetime(date_string).date()

            return dateutil_parser.isoparse(date_string).date()

        except Exception as e:
            logger.error(f"Date string parse failed: {date_string} - {e}")
            raise ValueError(f"Invalid date format: {date_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """Format a datetime as an ISO string with a Z suffix."""
        try:
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            else:
                dt = dt.astimezone(timezone.utc)

            return dt.isoformat().replace('+00:00', 'Z')

        except Exception as e:
            logger.error(f"ISO string conversion failed: {dt} - {e}")
            raise ValueError(f"Cannot convert datetime to an ISO string: {dt}")

    @staticmethod
    def to_date_string(d: date) -> str:
        """Format a date as YYYY-MM-DD."""
        try:
            return d.strftime('%Y-%m-%d')
        except Exception as e:
            logger.error(f"Date string conversion failed: {d} - {e}")
            raise ValueError(f"Cannot convert date to a string: {d}")

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Convert date/time fields before writing to the document store.

        Rules:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list are converted recursively
        """
        try:
            if isinstance(obj, date) and not isinstance(obj, datetime):
                return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)

            elif isinstance(obj, datetime):
                if obj.tzinfo is None:
                    return obj.replace(tzinfo=timezone.utc)
                return obj.astimezone(timezone.utc)

            elif isinstance(obj, dict):
                return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}

            elif isinstance(obj, list):
                return [DateTimeUtils.for_firestore(item) for item in obj]

            else:
                return obj

        except Exception as e:
            logger.error(f"Firestore conversion failed: {obj} ({type(obj)}) - {e}")
            raise ValueError(f"Cannot convert to a Firestore compatible value: {obj}")

    @staticmethod
    def to_datetime(value: Any) -> datetime:
        """
        Coerce a stored timestamp into a UTC datetime.

        Accepts Firestore timestamps, datetime objects and ISO strings
        (the JSON store keeps timestamps as strings).
        """
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        if isinstance(value, str):
            return DateTimeUtils.parse_iso_datetime(value)
        if isinstance(value, date):
            return datetime.combine(value, time.min).replace(tzinfo=timezone.utc)
        if hasattr(value, 'timestamp'):
            return datetime.fromtimestamp(value.timestamp(), tz=timezone.utc)
        raise ValueError(f"Cannot convert to datetime: {value!r}")

    @staticmethod
    def to_date(value: Union[date, datetime, str]) -> date:
        """Coerce a date-like value (date, datetime or string) into a date."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            return DateTimeUtils.parse_date_string(value)
        raise ValueError(f"Cannot convert to date: {value!r}")

    @staticmethod
    def difference(start: date, end: date) -> relativedelta:
        """Calendar difference between two dates."""
        return relativedelta(end, start)

