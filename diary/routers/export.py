# export router: download every entry as a pretty-printed json file

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from diary.dependencies import get_store
from diary.services.entry_store import EntryStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/export", tags=["export"])


@router.get("")
def export_entries(store: EntryStore = Depends(get_store)):
    """attachment named diary-entries-<today>.json"""
    if len(store) == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No entries to export",
        )

    filename = store.export_filename()
    logger.info(f"Exporting {len(store)} entries as {filename}")
    return Response(
        content=store.export_all(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
