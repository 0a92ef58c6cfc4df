"""Test data generators for contacts."""

from .contact_generator import ContactSeeder, generate_contact_document, generate_contact_payload

__all__ = ["ContactSeeder", "generate_contact_document", "generate_contact_payload"]
