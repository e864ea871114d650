"""Date manipulation utilities"""

import calendar
from datetime import date
from typing import Tuple

# English names regardless of process locale
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
MONTH_ABBREVIATIONS = [name[:3] for name in MONTH_NAMES]


def month_name(month: int) -> str:
    """Full English month name for 1-12"""
    return MONTH_NAMES[month - 1]


def previous_month(year: int, month: int) -> Tuple[int, int]:
    """(year, month) of the month before, wrapping January to December"""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def same_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def due_date_for(year: int, month: int, due_day: int = 15) -> date:
    """Due date inside the billed month, clamped to the month's last day"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))


def today() -> date:
    """Current date; patched in tests"""
    return date.today()
