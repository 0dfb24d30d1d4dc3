# entries router: read, write and search diary entries
# one entry per date; writes persist immediately and report storage failures

import logging
import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from diary.config import settings
from diary.dependencies import get_store
from diary.models.entry import Entry, EntryUpsert, SearchResponse
from diary.services.entry_store import EntryStore, sort_by_date
from diary.services.search import build_results
from diary.services.storage import StorageUnavailable

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/entries", tags=["entries"])

STORAGE_WARNING = "Storage unavailable, entry may not be saved"


@router.get("", response_model=list[Entry])
def list_entries(
    q: str = Query("", description="case-insensitive text to match in title or content"),
    store: EntryStore = Depends(get_store),
):
    """list entries, newest date first"""
    return sort_by_date(store.query(q))


@router.get("/recent", response_model=list[Entry])
def recent_entries(
    limit: int = Query(settings.RECENT_ENTRIES_LIMIT, ge=1, le=100),
    store: EntryStore = Depends(get_store),
):
    return store.recent_by_date(limit)


@router.get("/search", response_model=SearchResponse)
def search_entries(
    q: str = Query("", description="case-insensitive text to match in title or content"),
    store: EntryStore = Depends(get_store),
):
    """search results with display titles and excerpts for the search view"""
    return build_results(store.query(q), q, excerpt_length=settings.EXCERPT_LENGTH)


@router.get("/{entry_date}", response_model=Entry)
def get_entry(
    entry_date: dt.date,
    store: EntryStore = Depends(get_store),
):
    entry = store.find_by_date(entry_date)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No entry for {entry_date.isoformat()}",
        )
    return entry


@router.put("/{entry_date}", response_model=Entry)
def save_entry(
    entry_date: dt.date,
    body: EntryUpsert,
    store: EntryStore = Depends(get_store),
):
    """create the entry for a date, or replace its title, content and mood"""
    try:
        return store.upsert(entry_date, title=body.title, content=body.content, mood=body.mood)
    except StorageUnavailable as e:
        logger.error(f"Could not save entry for {entry_date.isoformat()}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=STORAGE_WARNING,
        )


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: str,
    store: EntryStore = Depends(get_store),
):
    """delete an entry by id. deleting an unknown id succeeds without changes."""
    try:
        store.delete(entry_id)
    except StorageUnavailable as e:
        logger.error(f"Could not delete entry {entry_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=STORAGE_WARNING,
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
