"""
Contacts router.

Provides REST API endpoints for:
- Listing and fetching contacts
- Creating contacts
- Partial updates (PUT and PATCH)
- Toggling the favorite flag
- Deleting contacts

Handlers re-raise ``HTTPException`` and turn anything else into a logged
500 so driver errors never leak to clients.
"""

import structlog
from typing import List
from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, status

from api.src.models.contact import (
    Contact,
    CreateContactRequest,
    DeleteContactResponse,
    ErrorResponse,
    UpdateContactRequest,
    UpdateFavoriteRequest,
)
from api.src.repositories.contact_repo import ContactRepository
from api.src.dependencies import get_contact_object_id, get_contact_repository

logger = structlog.get_logger(__name__)

NOT_FOUND_MESSAGE = "Contact not found"
EMPTY_BODY_MESSAGE = "Body must have at least one field"
SERVER_ERROR_MESSAGE = "Server error"

contacts_router = APIRouter(
    prefix="/contacts",
    tags=["Contacts"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
        500: {"model": ErrorResponse, "description": "Server Error"}
    }
)


def _not_found(contact_id: ObjectId) -> HTTPException:
    logger.warning("contact_not_found", contact_id=str(contact_id))
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=NOT_FOUND_MESSAGE
    )


def _server_error(event: str, error: Exception, **context) -> HTTPException:
    logger.error(event, error=str(error), exc_info=True, **context)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=SERVER_ERROR_MESSAGE
    )


# ============================================================================
# READ ENDPOINTS
# ============================================================================


@contacts_router.get(
    "",
    response_model=List[Contact],
    status_code=status.HTTP_200_OK,
    summary="List Contacts"
)
async def get_all_contacts(
    repo: ContactRepository = Depends(get_contact_repository)
) -> List[Contact]:
    """Return every contact."""
    try:
        return await repo.list_contacts()
    except Exception as e:
        raise _server_error("contact_list_error", e)


@contacts_router.get(
    "/{contact_id}",
    response_model=Contact,
    status_code=status.HTTP_200_OK,
    summary="Get Contact",
    responses={404: {"model": ErrorResponse, "description": "Contact not found"}}
)
async def get_one_contact(
    contact_id: ObjectId = Depends(get_contact_object_id),
    repo: ContactRepository = Depends(get_contact_repository)
) -> Contact:
    """
    Get contact by ID.

    Raises:
        HTTPException: 404 if the contact does not exist
    """
    try:
        contact = await repo.get_contact_by_id(contact_id)
        if contact is None:
            raise _not_found(contact_id)
        return contact
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("contact_get_error", e, contact_id=str(contact_id))


# ============================================================================
# WRITE ENDPOINTS
# ============================================================================


@contacts_router.post(
    "",
    response_model=Contact,
    status_code=status.HTTP_201_CREATED,
    summary="Create Contact",
    description="""
    Create a contact.

    **Request Body:**
    - name: Contact name (1-100 characters)
    - email: Valid email address
    - phone: Phone number

    **Success Response (201):** the stored contact, with its new ID

    **Error Responses:**
    - 400: Missing, malformed or unknown fields
    """
)
async def create_contact(
    create_request: CreateContactRequest,
    repo: ContactRepository = Depends(get_contact_repository)
) -> Contact:
    """Create a contact from a validated body."""
    try:
        contact = await repo.add_contact(
            name=create_request.name,
            email=create_request.email,
            phone=create_request.phone
        )
        logger.info("contact_created", contact_id=contact.id)
        return contact
    except Exception as e:
        raise _server_error("contact_create_error", e)


@contacts_router.put(
    "/{contact_id}",
    response_model=Contact,
    status_code=status.HTTP_200_OK,
    summary="Update Contact",
    responses={404: {"model": ErrorResponse, "description": "Contact not found"}}
)
@contacts_router.patch(
    "/{contact_id}",
    response_model=Contact,
    status_code=status.HTTP_200_OK,
    summary="Update Contact",
    responses={404: {"model": ErrorResponse, "description": "Contact not found"}}
)
async def update_contact(
    update_request: UpdateContactRequest,
    contact_id: ObjectId = Depends(get_contact_object_id),
    repo: ContactRepository = Depends(get_contact_repository)
) -> Contact:
    """
    Merge the supplied fields into a contact.

    PUT and PATCH behave the same: omitted fields keep their values.

    Raises:
        HTTPException: 400 for an empty body, 404 if the contact does not exist
    """
    changes = update_request.changes()
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=EMPTY_BODY_MESSAGE
        )

    try:
        contact = await repo.update_contact_by_id(contact_id, changes)
        if contact is None:
            raise _not_found(contact_id)
        logger.info(
            "contact_updated",
            contact_id=contact.id,
            fields=sorted(changes)
        )
        return contact
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("contact_update_error", e, contact_id=str(contact_id))


@contacts_router.patch(
    "/{contact_id}/favorite",
    response_model=Contact,
    status_code=status.HTTP_200_OK,
    summary="Update Favorite Status",
    responses={404: {"model": ErrorResponse, "description": "Contact not found"}}
)
async def update_favorite_status(
    favorite_request: UpdateFavoriteRequest,
    contact_id: ObjectId = Depends(get_contact_object_id),
    repo: ContactRepository = Depends(get_contact_repository)
) -> Contact:
    """Set the favorite flag of a contact."""
    try:
        contact = await repo.update_status_contact(contact_id, favorite_request.favorite)
        if contact is None:
            raise _not_found(contact_id)
        logger.info(
            "contact_favorite_updated",
            contact_id=contact.id,
            favorite=contact.favorite
        )
        return contact
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("contact_favorite_error", e, contact_id=str(contact_id))


@contacts_router.delete(
    "/{contact_id}",
    response_model=DeleteContactResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Contact",
    responses={404: {"model": ErrorResponse, "description": "Contact not found"}}
)
async def delete_contact(
    contact_id: ObjectId = Depends(get_contact_object_id),
    repo: ContactRepository = Depends(get_contact_repository)
) -> DeleteContactResponse:
    """
    Delete a contact and echo it back.

    Raises:
        HTTPException: 404 if the contact does not exist
    """
    try:
        contact = await repo.remove_contact(contact_id)
        if contact is None:
            raise _not_found(contact_id)
        logger.info("contact_deleted", contact_id=contact.id)
        return DeleteContactResponse(contact=contact)
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("contact_delete_error", e, contact_id=str(contact_id))
