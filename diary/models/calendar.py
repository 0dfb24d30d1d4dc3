# calendar models: month grid for the calendar view

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


class CalendarDay(BaseModel):
    date: dt.date
    day: int
    has_entry: bool = Field(False, alias="hasEntry")
    is_today: bool = Field(False, alias="isToday")

    model_config = {"populate_by_name": True}


class MonthRef(BaseModel):
    year: int
    month: int


class CalendarMonth(BaseModel):
    """sunday-first grid. leading None cells pad the first week."""
    year: int
    month: int
    label: str
    week_days: list[str] = Field(..., alias="weekDays")
    days: list[Optional[CalendarDay]]
    entry_count: int = Field(0, alias="entryCount")
    previous: MonthRef
    next: MonthRef

    model_config = {"populate_by_name": True}
