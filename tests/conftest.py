# shared fixtures for diary tests
# provides in-memory storage, a controllable clock, seeded stores and an httpx test client

import datetime as dt

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from diary.main import app
from diary.dependencies import get_store
from diary.services.entry_store import EntryStore
from diary.services.storage import MemoryStorage, StorageUnavailable


START = dt.datetime(2024, 3, 1, 8, 30, tzinfo=dt.timezone.utc)


class FakeClock:
    """callable clock that only moves when told to"""

    def __init__(self, now=START):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + dt.timedelta(**kwargs)
        return self.now


class FailingStorage(MemoryStorage):
    """reads fine, every write fails once fail_writes is set"""

    def __init__(self, data=None):
        super().__init__(data)
        self.fail_writes = False
        self.fail_reads = False

    def get_item(self, key):
        if self.fail_reads:
            raise StorageUnavailable("storage access denied")
        return super().get_item(key)

    def set_item(self, key, value):
        if self.fail_writes:
            raise StorageUnavailable("quota exceeded")
        super().set_item(key, value)


class CountingIds:
    def __init__(self):
        self.n = 0

    def __call__(self):
        self.n += 1
        return f"entry-{self.n}"


# sample data

SAMPLE_ENTRIES = [
    ("2024-01-01", "New year", "Resolutions: read more, run more.", "happy"),
    ("2024-03-05", "", "Had a Great day at the lake", "love"),
    ("2024-02-10", "Rainy", "Stayed in and cooked soup", None),
    ("2024-04-01", "April", "Fooled nobody this year", "neutral"),
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return FailingStorage()


@pytest.fixture
def store(storage, clock):
    """empty store over in-memory storage"""
    s = EntryStore(storage, clock=clock, id_factory=CountingIds())
    s.load()
    return s


@pytest.fixture
def seeded_store(store, clock):
    """store holding SAMPLE_ENTRIES, one minute apart"""
    for date, title, content, mood in SAMPLE_ENTRIES:
        store.upsert(date, title=title, content=content, mood=mood)
        clock.advance(minutes=1)
    return store


@pytest_asyncio.fixture
async def client(seeded_store):
    """httpx async test client over the seeded store"""

    async def override_get_store():
        return seeded_store

    app.dependency_overrides[get_store] = override_get_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def empty_client(store):
    """client over an empty store"""

    async def override_get_store():
        return store

    app.dependency_overrides[get_store] = override_get_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
