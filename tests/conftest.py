"""
Shared fixtures for the contacts API tests.

Provides an in-memory stand-in for ``ContactRepository`` and a FastAPI
``TestClient`` wired to it through ``app.dependency_overrides``. The
application lifespan is not entered, so no MongoDB is needed.
"""

from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.src.dependencies import get_contact_repository
from api.src.main import app
from api.src.models.contact import Contact


class InMemoryContactRepository:
    """Dict-backed double with the same async surface as ContactRepository."""

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.writes = 0

    async def list_contacts(self) -> List[Contact]:
        return [Contact.from_document(doc) for doc in self.documents.values()]

    async def get_contact_by_id(self, contact_id: ObjectId) -> Optional[Contact]:
        document = self.documents.get(contact_id)
        return Contact.from_document(document) if document else None

    async def add_contact(self, name: str, email: str, phone: str) -> Contact:
        document = {
            "_id": ObjectId(),
            "name": name,
            "email": email,
            "phone": phone,
            "favorite": False,
        }
        self.documents[document["_id"]] = document
        self.writes += 1
        return Contact.from_document(document)

    async def update_contact_by_id(
        self, contact_id: ObjectId, fields: Dict[str, Any]
    ) -> Optional[Contact]:
        self.writes += 1
        document = self.documents.get(contact_id)
        if document is None:
            return None
        document.update(fields)
        return Contact.from_document(document)

    async def update_status_contact(
        self, contact_id: ObjectId, favorite: bool
    ) -> Optional[Contact]:
        return await self.update_contact_by_id(contact_id, {"favorite": favorite})

    async def remove_contact(self, contact_id: ObjectId) -> Optional[Contact]:
        self.writes += 1
        document = self.documents.pop(contact_id, None)
        return Contact.from_document(document) if document else None

    async def ping(self) -> bool:
        return True


@pytest.fixture
def contact_repo() -> InMemoryContactRepository:
    """Empty in-memory contact store."""
    return InMemoryContactRepository()


@pytest.fixture
def client(contact_repo):
    """HTTP client whose requests hit the in-memory store."""
    app.dependency_overrides[get_contact_repository] = lambda: contact_repo
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def contact_payload() -> Dict[str, str]:
    """Valid create-contact body."""
    return {
        "name": "Allen Raymond",
        "email": "nulla.ante@vestibul.co.uk",
        "phone": "(992) 914-3792",
    }
