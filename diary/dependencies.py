# fastapi dependency injection
# one entry store per process, created in the app lifespan

import logging
from typing import Optional

from diary.config import settings
from diary.services.entry_store import EntryStore
from diary.services.storage import FileStorage

logger = logging.getLogger(__name__)

_store: Optional[EntryStore] = None


def open_store(data_dir=None, key: Optional[str] = None) -> EntryStore:
    """build a file-backed store and load it"""
    storage = FileStorage(data_dir or settings.DIARY_DATA_DIR)
    store = EntryStore(storage, key=key or settings.DIARY_STORAGE_KEY)
    store.load()
    return store


def set_store(store: Optional[EntryStore]):
    global _store
    _store = store


async def get_store() -> EntryStore:
    """dependency injection for the entry store"""
    global _store
    if _store is None:
        logger.info("Entry store requested before startup, opening it now")
        _store = open_store()
    return _store
