"""
Contact repository for database operations.

Provides async CRUD operations for contacts using pymongo's asyncio API.
Every call is a single round trip to MongoDB; writes rely on the server's
per-document atomicity and are never retried here.
"""

import structlog
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from api.src.models.contact import Contact
from api.src.config import get_settings
from shared.metrics import setup_metrics
from shared.tracing import trace_function

logger = structlog.get_logger(__name__)


class ContactRepository:
    """Repository for contact database operations."""

    def __init__(self, database: AsyncDatabase):
        """
        Initialize contact repository.

        Args:
            database: pymongo async database handle
        """
        self.settings = get_settings()
        self.database = database
        self.collection = database[self.settings.mongodb_collection]
        self.metrics = setup_metrics()

    def _observe(self, operation: str):
        return self.metrics.observe(self.settings.mongodb_collection, operation)

    @trace_function("contacts.list")
    async def list_contacts(self) -> List[Contact]:
        """
        List every contact in the collection.

        Returns:
            All contacts, in natural order
        """
        with self._observe("list"):
            documents = await self.collection.find({}).to_list(length=None)

        logger.debug("contacts_listed", count=len(documents))
        return [Contact.from_document(doc) for doc in documents]

    @trace_function("contacts.get")
    async def get_contact_by_id(self, contact_id: ObjectId) -> Optional[Contact]:
        """
        Get contact by ID.

        Args:
            contact_id: Contact ObjectId

        Returns:
            Contact or None if not found
        """
        with self._observe("get"):
            document = await self.collection.find_one({"_id": contact_id})

        if document is None:
            logger.debug("contact_not_found", contact_id=str(contact_id))
            return None
        return Contact.from_document(document)

    @trace_function("contacts.create")
    async def add_contact(self, name: str, email: str, phone: str) -> Contact:
        """
        Create a new contact.

        Args:
            name: Contact name
            email: Email address
            phone: Phone number

        Returns:
            Created contact with its store-assigned ID
        """
        document: Dict[str, Any] = {
            "name": name,
            "email": email,
            "phone": phone,
            "favorite": False,
        }

        with self._observe("create"):
            result = await self.collection.insert_one(document)

        document["_id"] = result.inserted_id
        logger.debug("contact_inserted", contact_id=str(result.inserted_id))
        return Contact.from_document(document)

    @trace_function("contacts.update")
    async def update_contact_by_id(
        self,
        contact_id: ObjectId,
        fields: Dict[str, Any]
    ) -> Optional[Contact]:
        """
        Merge the given fields into an existing contact.

        Fields that are not supplied keep their stored values.

        Args:
            contact_id: Contact ObjectId
            fields: Field values to set (must not be empty)

        Returns:
            Updated contact or None if not found
        """
        if not fields:
            raise ValueError("fields must not be empty")

        with self._observe("update"):
            document = await self.collection.find_one_and_update(
                {"_id": contact_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )

        if document is None:
            logger.debug("contact_not_found", contact_id=str(contact_id))
            return None
        return Contact.from_document(document)

    @trace_function("contacts.update_status")
    async def update_status_contact(
        self,
        contact_id: ObjectId,
        favorite: bool
    ) -> Optional[Contact]:
        """
        Set the favorite flag of a contact.

        Args:
            contact_id: Contact ObjectId
            favorite: New favorite flag

        Returns:
            Updated contact or None if not found
        """
        with self._observe("update_status"):
            document = await self.collection.find_one_and_update(
                {"_id": contact_id},
                {"$set": {"favorite": favorite}},
                return_document=ReturnDocument.AFTER,
            )

        if document is None:
            logger.debug("contact_not_found", contact_id=str(contact_id))
            return None
        return Contact.from_document(document)

    @trace_function("contacts.remove")
    async def remove_contact(self, contact_id: ObjectId) -> Optional[Contact]:
        """
        Delete a contact.

        Args:
            contact_id: Contact ObjectId

        Returns:
            The deleted contact or None if not found
        """
        with self._observe("remove"):
            document = await self.collection.find_one_and_delete({"_id": contact_id})

        if document is None:
            logger.debug("contact_not_found", contact_id=str(contact_id))
            return None
        return Contact.from_document(document)

    async def ping(self) -> bool:
        """
        Check the database answers a ping.

        Returns:
            True when the server responded
        """
        with self._observe("ping"):
            await self.database.command("ping")
        return True
