# calendar math for the month view and day navigation
# sunday-first weeks, matching the diary front end

import calendar
import datetime as dt
from typing import Iterable, Optional

from diary.models.calendar import CalendarDay, CalendarMonth, MonthRef

WEEK_DAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def _check_month(month: int):
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {month}, expected 1-12")


def shift_date(date: dt.date, days: int) -> dt.date:
    return date + dt.timedelta(days=days)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """move a (year, month) pair by delta months, wrapping the year"""
    _check_month(month)
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    _check_month(month)
    return f"{MONTH_NAMES[month - 1]} {year}"


def leading_blanks(year: int, month: int) -> int:
    """number of empty cells before the 1st in a sunday-first week"""
    # date.weekday(): monday=0 .. sunday=6
    return (dt.date(year, month, 1).weekday() + 1) % 7


def month_grid(
    year: int,
    month: int,
    entry_dates: Iterable[dt.date] = (),
    today: Optional[dt.date] = None,
) -> CalendarMonth:
    _check_month(month)
    marked = set(entry_dates)
    today = today or dt.date.today()

    days: list[Optional[CalendarDay]] = [None] * leading_blanks(year, month)
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        date = dt.date(year, month, day)
        days.append(CalendarDay(
            date=date,
            day=day,
            hasEntry=date in marked,
            isToday=date == today,
        ))

    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)

    return CalendarMonth(
        year=year,
        month=month,
        label=month_label(year, month),
        weekDays=list(WEEK_DAYS),
        days=days,
        entryCount=sum(1 for d in days if d is not None and d.has_entry),
        previous=MonthRef(year=prev_year, month=prev_month),
        next=MonthRef(year=next_year, month=next_month),
    )
