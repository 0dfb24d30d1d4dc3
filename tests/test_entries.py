# tests for the entries router: list, recent, search, read, write and delete

from tests.conftest import SAMPLE_ENTRIES


class TestListEntries:

    async def test_list_all_newest_first(self, client):
        resp = await client.get("/entries")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == len(SAMPLE_ENTRIES)
        assert [e["date"] for e in data] == ["2024-04-01", "2024-03-05", "2024-02-10", "2024-01-01"]

    async def test_list_filtered(self, client):
        resp = await client.get("/entries", params={"q": "GREAT"})
        assert resp.status_code == 200
        assert [e["date"] for e in resp.json()] == ["2024-03-05"]

    async def test_entry_fields_are_camel_case(self, client):
        data = (await client.get("/entries")).json()[0]
        assert set(data) == {"id", "date", "title", "content", "mood", "createdAt", "updatedAt"}

    async def test_recent(self, client):
        resp = await client.get("/entries/recent", params={"limit": 2})
        assert resp.status_code == 200
        assert [e["date"] for e in resp.json()] == ["2024-04-01", "2024-03-05"]

    async def test_recent_limit_validated(self, client):
        resp = await client.get("/entries/recent", params={"limit": 0})
        assert resp.status_code == 422

    async def test_search(self, client):
        resp = await client.get("/entries/search", params={"q": "cook"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 1
        assert data["summary"] == 'Found 1 result for "cook"'
        result = data["results"][0]
        assert result["displayTitle"] == "Rainy"
        assert result["characterCount"] == len("Stayed in and cooked soup")
        assert result["entry"]["date"] == "2024-02-10"


class TestGetEntry:

    async def test_get_existing(self, client):
        resp = await client.get("/entries/2024-03-05")
        assert resp.status_code == 200
        data = resp.json()
        assert data["content"] == "Had a Great day at the lake"
        assert data["mood"] == "love"

    async def test_get_missing(self, client):
        resp = await client.get("/entries/2020-01-01")
        assert resp.status_code == 404

    async def test_get_bad_date(self, client):
        resp = await client.get("/entries/2024-13-01")
        assert resp.status_code == 422


class TestSaveEntry:

    async def test_create(self, empty_client, store):
        resp = await empty_client.put(
            "/entries/2024-03-01",
            json={"title": "", "content": "Morning run", "mood": "happy"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["date"] == "2024-03-01"
        assert data["createdAt"] == data["updatedAt"]
        assert len(store) == 1

    async def test_update_keeps_identity(self, empty_client, store, clock):
        first = (await empty_client.put("/entries/2024-03-01", json={"content": "Morning run"})).json()
        clock.advance(minutes=10)
        second = (await empty_client.put("/entries/2024-03-01", json={"content": "Morning run, 5k"})).json()

        assert second["id"] == first["id"]
        assert second["createdAt"] == first["createdAt"]
        assert second["updatedAt"] > first["updatedAt"]
        assert second["content"] == "Morning run, 5k"
        assert second["title"] == ""
        assert len(store) == 1

    async def test_rejects_unknown_mood(self, empty_client, store):
        resp = await empty_client.put("/entries/2024-03-01", json={"content": "x", "mood": "angry"})
        assert resp.status_code == 422
        assert len(store) == 0

    async def test_storage_failure_is_reported(self, empty_client, storage):
        storage.fail_writes = True
        resp = await empty_client.put("/entries/2024-03-01", json={"content": "x"})
        assert resp.status_code == 503
        assert "may not be saved" in resp.json()["detail"]


class TestDeleteEntry:

    async def test_delete(self, client, seeded_store):
        entry = seeded_store.find_by_date("2024-01-01")
        resp = await client.delete(f"/entries/{entry.id}")
        assert resp.status_code == 204
        assert (await client.get("/entries/2024-01-01")).status_code == 404

    async def test_delete_unknown_is_noop(self, client, seeded_store):
        before = len(seeded_store)
        resp = await client.delete("/entries/does-not-exist")
        assert resp.status_code == 204
        assert len(seeded_store) == before

    async def test_delete_storage_failure(self, client, seeded_store, storage):
        entry = seeded_store.find_by_date("2024-01-01")
        storage.fail_writes = True
        resp = await client.delete(f"/entries/{entry.id}")
        assert resp.status_code == 503
