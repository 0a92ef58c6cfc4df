"""FastAPI service for managing contacts.

This package provides REST API endpoints for listing, creating, updating
and deleting contact records stored in MongoDB.
"""

__version__ = "1.0.0"
