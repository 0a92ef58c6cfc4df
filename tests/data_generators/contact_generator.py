"""Contact data generator using Faker.

Generates request payloads and stored documents that pass the API's
validation rules.
"""

import random
from typing import Any, Dict, List, Optional

from faker import Faker
from pymongo import MongoClient
from pymongo.collection import Collection


def generate_contact_payload(fake: Optional[Faker] = None) -> Dict[str, str]:
    """Generate a valid create-contact body.

    Args:
        fake: Faker instance (creates new one if not provided)

    Returns:
        Dict with name, email and phone
    """
    if fake is None:
        fake = Faker()

    return {
        "name": fake.name(),
        "email": fake.email(),
        "phone": fake.numerify("(###) ###-####"),
    }


def generate_contact_document(fake: Optional[Faker] = None) -> Dict[str, Any]:
    """Generate a contact document as it is stored in MongoDB.

    Args:
        fake: Faker instance (creates new one if not provided)

    Returns:
        Contact document without ``_id``
    """
    document: Dict[str, Any] = dict(generate_contact_payload(fake))
    document["favorite"] = random.random() < 0.25
    return document


class ContactSeeder:
    """Seeds a contacts collection through the synchronous driver."""

    def __init__(
        self,
        connection_string: str,
        database: str,
        collection_name: str = "contacts",
        seed: Optional[int] = None,
    ) -> None:
        """Initialize the seeder.

        Args:
            connection_string: MongoDB connection string
            database: Database name
            collection_name: Collection name
            seed: Random seed for reproducible data
        """
        self.client = MongoClient(connection_string)
        self.collection: Collection = self.client[database][collection_name]

        self.fake = Faker()
        if seed is not None:
            Faker.seed(seed)
            random.seed(seed)

    def seed(self, count: int) -> List[Dict[str, Any]]:
        """Insert ``count`` contacts.

        Args:
            count: Number of documents to insert

        Returns:
            Inserted documents, including their ``_id``
        """
        documents = [generate_contact_document(self.fake) for _ in range(count)]
        if documents:
            self.collection.insert_many(documents)
        return documents

    def clear(self) -> int:
        """Delete every contact.

        Returns:
            Number of deleted documents
        """
        return self.collection.delete_many({}).deleted_count

    def close(self) -> None:
        """Close the client."""
        self.client.close()
