import datetime
import functools
from typing import Iterable, List, Optional


class DateOrdering:
    """Chronological ordering for ``yyyy-MM-dd`` store keys."""

    @staticmethod
    def parse(value: str) -> Optional[datetime.date]:
        """Return the calendar date for ``value`` or ``None`` if unparseable."""
        try:
            return datetime.date.fromisoformat(value)
        except (TypeError, ValueError):
            return None

    @classmethod
    def compare(cls, left: str, right: str) -> int:
        """Return -1, 0 or 1 like a classic comparator.

        Two parseable dates are compared as dates; otherwise the raw strings
        are compared.
        """
        a, b = cls.parse(left), cls.parse(right)
        if a is None or b is None:
            return (left > right) - (left < right)
        return (a > b) - (a < b)

    @classmethod
    def is_before(cls, left: str, right: str) -> bool:
        return cls.compare(left, right) < 0

    @classmethod
    def sorted_dates(cls, dates: Iterable[str], descending: bool = False) -> List[str]:
        return sorted(dates, key=functools.cmp_to_key(cls.compare), reverse=descending)

    @classmethod
    def dates_before(cls, dates: Iterable[str], date: str) -> List[str]:
        """Return dates strictly earlier than ``date``, newest first."""
        earlier = [d for d in dates if cls.is_before(d, date)]
        return cls.sorted_dates(earlier, descending=True)

    @classmethod
    def day_of_week(cls, value: str) -> Optional[int]:
        """Return 0 for Sunday through 6 for Saturday."""
        parsed = cls.parse(value)
        if parsed is None:
            return None
        return (parsed.weekday() + 1) % 7

    @staticmethod
    def today() -> str:
        return datetime.date.today().isoformat()
