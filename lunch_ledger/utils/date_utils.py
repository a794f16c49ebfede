"""Date manipulation utilities"""

from datetime import date
from typing import Callable, Optional

Clock = Callable[[], date]


def today() -> date:
    """Current local date; the default clock for date-relative replies"""
    return date.today()


def is_past(day: Optional[date], clock: Clock = today) -> bool:
    """True if day is strictly before the clock's current date"""
    return day is not None and day < clock()


def format_date(day: Optional[date]) -> str:
    """Short display form, e.g. 'Wed Jan 10'"""
    if day is None:
        return "?"
    return day.strftime("%a %b %d")
