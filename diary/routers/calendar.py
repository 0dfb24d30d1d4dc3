# calendar router: month grid with days that have entries

from fastapi import APIRouter, Depends, Path

from diary.dependencies import get_store
from diary.models.calendar import CalendarMonth
from diary.services.calendar import month_grid
from diary.services.entry_store import EntryStore

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/{year}/{month}", response_model=CalendarMonth)
def get_month(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    store: EntryStore = Depends(get_store),
):
    return month_grid(year, month, store.dates_with_entries(year, month))
