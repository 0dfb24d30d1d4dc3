# entry store: the in-memory diary collection backed by key/value storage
# natural key is the entry date; the full collection is persisted after every mutation

import functools
import json
import logging
import threading
import uuid
import datetime as dt
from typing import Callable, Iterable, Optional, Union

from pydantic import ValidationError

from diary.models.entry import Entry, Mood, as_utc
from diary.services.storage import (
    KeyValueStorage,
    StorageError,
    StorageUnavailable,
    DeserializationError,
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "diary-entries"
DEFAULT_RECENT_LIMIT = 10

DateLike = Union[dt.date, str]


def _locked(method):
    """serialize mutations; route handlers run in a threadpool"""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def new_entry_id() -> str:
    return uuid.uuid4().hex


def parse_date(value: DateLike) -> dt.date:
    """accept a date or a strict YYYY-MM-DD string"""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and len(value) == 10:
        try:
            return dt.datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            pass
    raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD")


class EntryStore:
    """durable, queryable collection of diary entries.

    every operation is synchronous; load and writes hold a lock. reads never touch storage after load();
    writes persist the whole collection and raise StorageUnavailable when
    that fails (the in-memory change is kept so the caller can retry).
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], dt.datetime] = utc_now,
        id_factory: Callable[[], str] = new_entry_id,
    ):
        self.storage = storage
        self.key = key
        self._clock = clock
        self._id_factory = id_factory
        self._entries: list[Entry] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    # persistence

    @_locked
    def load(self) -> list[Entry]:
        """read the persisted collection. any failure yields an empty collection."""
        try:
            raw = self.storage.get_item(self.key)
            entries = self._deserialize(raw) if raw is not None else []
        except StorageError as e:
            logger.warning(f"Could not load diary entries, starting with an empty diary: {e}")
            entries = []

        self._entries = entries
        logger.info(f"Loaded {len(entries)} diary entries from '{self.key}'")
        return list(entries)

    def _deserialize(self, raw: str) -> list[Entry]:
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DeserializationError(f"Stored entries are not valid JSON: {e}") from e

        if not isinstance(records, list):
            raise DeserializationError(f"Stored entries must be a JSON array, got {type(records).__name__}")

        entries = []
        seen_dates = set()
        seen_ids = set()
        for record in records:
            if not isinstance(record, dict):
                raise DeserializationError(f"Stored entry is not an object: {record!r}")
            record = self._normalize_record(record)
            try:
                entry = Entry.model_validate(record)
            except ValidationError as e:
                raise DeserializationError(f"Stored entry {record.get('id')!r} is invalid: {e}") from e

            # keep dates and ids unique even if the stored data is not
            if entry.date in seen_dates:
                logger.warning(f"Dropping duplicate entry {entry.id} for {entry.date.isoformat()}")
                continue
            if entry.id in seen_ids:
                logger.warning(f"Dropping entry for {entry.date.isoformat()} with duplicate id {entry.id}")
                continue
            seen_dates.add(entry.date)
            seen_ids.add(entry.id)
            entries.append(entry)
        return entries

    @staticmethod
    def _normalize_record(record: dict) -> dict:
        record = dict(record)
        if isinstance(record.get("id"), int):
            record["id"] = str(record["id"])
        for field in ("title", "content"):
            if record.get(field) is None:
                record[field] = ""

        mood = record.get("mood")
        if mood is not None:
            try:
                record["mood"] = Mood.parse(mood)
            except ValueError:
                logger.warning(f"Ignoring unknown mood {mood!r} on entry {record.get('id')}")
                record["mood"] = None
        return record

    def _persist(self):
        payload = json.dumps([e.to_record() for e in self._entries], ensure_ascii=False)
        try:
            self.storage.set_item(self.key, payload)
        except OSError as e:
            raise StorageUnavailable(f"Cannot persist diary entries: {e}") from e
        logger.debug(f"Persisted {len(self._entries)} diary entries")

    # reads

    def find_by_date(self, date: DateLike) -> Optional[Entry]:
        target = parse_date(date)
        for entry in self._entries:
            if entry.date == target:
                return entry
        return None

    def get(self, entry_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def query(self, substring: Optional[str] = None) -> list[Entry]:
        """case-insensitive match on title or content. empty query matches everything."""
        if not substring:
            return list(self._entries)
        needle = substring.lower()
        return [
            e for e in self._entries
            if needle in e.title.lower() or needle in e.content.lower()
        ]

    def recent_by_date(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[Entry]:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        return sort_by_date(self._entries)[:limit]

    def dates_with_entries(self, year: int, month: int) -> set[dt.date]:
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month {month}, expected 1-12")
        return {
            e.date for e in self._entries
            if e.date.year == year and e.date.month == month
        }

    # writes

    @_locked
    def upsert(
        self,
        date: DateLike,
        title: Optional[str] = "",
        content: Optional[str] = "",
        mood: Union[Mood, str, None] = None,
    ) -> Entry:
        """write the entry for a date, creating it on first save"""
        entry_date = parse_date(date)
        entry_mood = Mood.parse(mood)
        now = as_utc(self._clock())

        entry = self.find_by_date(entry_date)
        if entry is not None:
            entry.title = title or ""
            entry.content = content or ""
            entry.mood = entry_mood
            # never move updatedAt backwards if the clock does
            entry.updated_at = max(now, entry.updated_at)
            logger.info(f"Updated entry {entry.id} for {entry_date.isoformat()}")
        else:
            entry = Entry(
                id=self._new_id(),
                date=entry_date,
                title=title or "",
                content=content or "",
                mood=entry_mood,
                created_at=now,
                updated_at=now,
            )
            self._entries.append(entry)
            logger.info(f"Created entry {entry.id} for {entry_date.isoformat()}")

        self._persist()
        return entry

    @_locked
    def delete(self, entry_id: str) -> bool:
        """remove an entry by id. unknown ids are a no-op."""
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            logger.info(f"Delete skipped, no entry with id {entry_id}")
            return False

        self._entries = remaining
        logger.info(f"Deleted entry {entry_id}")
        self._persist()
        return True

    def _new_id(self) -> str:
        existing = {e.id for e in self._entries}
        entry_id = self._id_factory()
        while entry_id in existing:
            entry_id = self._id_factory()
        return entry_id

    # export

    def export_all(self) -> str:
        """pretty-printed json array of every entry"""
        return json.dumps([e.to_record() for e in self._entries], indent=2, ensure_ascii=False)

    def export_filename(self, today: Optional[dt.date] = None) -> str:
        today = today or self._clock().date()
        return f"diary-entries-{today.isoformat()}.json"


def sort_by_date(entries: Iterable[Entry]) -> list[Entry]:
    """newest date first"""
    return sorted(entries, key=lambda e: e.date, reverse=True)
