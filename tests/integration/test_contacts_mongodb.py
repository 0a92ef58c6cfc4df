"""Integration tests for the contacts API against a real MongoDB.

Requires Docker. Deselected by default; run with ``pytest -m integration``.
"""

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import AsyncMongoClient

from api.src.dependencies import get_contact_repository
from api.src.main import app
from api.src.repositories.contact_repo import ContactRepository
from tests.containers.mongodb import MongoDBContainer
from tests.data_generators import ContactSeeder, generate_contact_payload

pytestmark = pytest.mark.integration

TEST_DB = "contacts_integration"


@pytest.fixture(scope="module")
def mongodb_container():
    """Start MongoDB container."""
    container = MongoDBContainer()
    container.start()
    yield container
    container.stop()


@pytest.fixture
def seeder(mongodb_container):
    """Synchronous seeder for the test database."""
    seeder = ContactSeeder(mongodb_container.get_connection_string(), TEST_DB, seed=42)
    yield seeder
    seeder.clear()
    seeder.close()


@pytest_asyncio.fixture
async def repo(mongodb_container):
    """Repository bound to a fresh test database."""
    client = AsyncMongoClient(mongodb_container.get_connection_string())
    yield ContactRepository(client[TEST_DB])
    await client.drop_database(TEST_DB)
    await client.close()


@pytest_asyncio.fixture
async def http(repo):
    """HTTP client running the app in-process against the real repository."""
    app.dependency_overrides[get_contact_repository] = lambda: repo
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_repository_round_trip(repo):
    created = await repo.add_contact("Reuben Henry", "pharetra.ut@dictum.co.uk", "(715) 598-5792")

    fetched = await repo.get_contact_by_id(ObjectId(created.id))
    assert fetched == created

    updated = await repo.update_contact_by_id(ObjectId(created.id), {"name": "Reuben H."})
    assert updated.name == "Reuben H."
    assert updated.email == created.email

    starred = await repo.update_status_contact(ObjectId(created.id), True)
    assert starred.favorite is True

    removed = await repo.remove_contact(ObjectId(created.id))
    assert removed.id == created.id
    assert await repo.get_contact_by_id(ObjectId(created.id)) is None


@pytest.mark.asyncio
async def test_missing_ids_return_none(repo):
    missing = ObjectId()

    assert await repo.get_contact_by_id(missing) is None
    assert await repo.update_contact_by_id(missing, {"name": "x"}) is None
    assert await repo.update_status_contact(missing, True) is None
    assert await repo.remove_contact(missing) is None


@pytest.mark.asyncio
async def test_list_returns_seeded_contacts(seeder, http):
    seeded = seeder.seed(5)

    response = await http.get("/contacts")

    assert response.status_code == 200
    assert {c["id"] for c in response.json()} == {str(d["_id"]) for d in seeded}


@pytest.mark.asyncio
async def test_http_lifecycle(http):
    payload = generate_contact_payload()

    created = await http.post("/contacts", json=payload)
    assert created.status_code == 201
    contact_id = created.json()["id"]

    fetched = await http.get(f"/contacts/{contact_id}")
    assert fetched.json() == created.json()

    patched = await http.patch(f"/contacts/{contact_id}/favorite", json={"favorite": True})
    assert patched.status_code == 200
    assert patched.json()["favorite"] is True

    deleted = await http.delete(f"/contacts/{contact_id}")
    assert deleted.status_code == 200
    assert deleted.json()["contact"]["id"] == contact_id

    gone = await http.get(f"/contacts/{contact_id}")
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_invalid_create_persists_nothing(http, repo):
    response = await http.post("/contacts", json={"name": "No Email"})

    assert response.status_code == 400
    assert await repo.list_contacts() == []
