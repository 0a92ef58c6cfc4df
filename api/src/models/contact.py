"""
Contact models.

Provides Pydantic schemas for:
- Contact request bodies (create, partial update, favorite toggle)
- Contact API responses
- Conversion from stored MongoDB documents

Request models reject unknown fields and explicit nulls so that a payload
either maps cleanly onto a ``$set`` update or fails with 400.
"""

import re
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, field_validator


# At least seven digits among 7-20 phone characters
PHONE_PATTERN = re.compile(r"\+?(?=(?:\D*\d){7})[0-9 \-().]{7,20}")

NAME_MAX_LENGTH = 100


def _validate_phone(v: str) -> str:
    if not PHONE_PATTERN.fullmatch(v):
        raise ValueError(
            "Phone must be 7-20 characters of digits, spaces, dashes, dots "
            "or parentheses with at least 7 digits, optionally starting with '+'"
        )
    return v


def _validate_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


# ============================================================================
# Pydantic Request Models
# ============================================================================


class CreateContactRequest(BaseModel):
    """Create contact request schema."""
    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Contact name"
    )
    email: EmailStr = Field(
        ...,
        description="Email address"
    )
    phone: str = Field(
        ...,
        description="Phone number"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Validate phone number format."""
        return _validate_phone(v)

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "name": "Allen Raymond",
                "email": "nulla.ante@vestibul.co.uk",
                "phone": "(992) 914-3792"
            }
        },
    )


class UpdateContactRequest(BaseModel):
    """Update contact request schema with optional fields."""
    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Contact name"
    )
    email: Optional[EmailStr] = Field(
        None,
        description="Email address"
    )
    phone: Optional[str] = Field(
        None,
        description="Phone number"
    )
    favorite: Optional[StrictBool] = Field(
        None,
        description="Favorite flag"
    )

    @field_validator("name", "email", "phone", "favorite", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """Fields may be omitted but not sent as null."""
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        """Names are stored trimmed and may not be blank."""
        return v if v is None else _validate_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        """Validate phone number format if provided."""
        if v is None:
            return v
        return _validate_phone(v)

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly present in the request body."""
        return self.model_dump(exclude_unset=True)

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "phone": "(992) 914-3792",
                "favorite": True
            }
        },
    )


class UpdateFavoriteRequest(BaseModel):
    """Favorite status request schema."""
    favorite: StrictBool = Field(
        ...,
        description="New favorite flag"
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"favorite": True}},
    )


# ============================================================================
# Pydantic Response Models
# ============================================================================


class Contact(BaseModel):
    """Contact as returned by the API."""
    id: str = Field(
        ...,
        description="Contact ID (24-character hex ObjectId)"
    )
    name: str = Field(..., description="Contact name")
    email: str = Field(..., description="Email address")
    phone: str = Field(..., description="Phone number")
    favorite: bool = Field(False, description="Favorite flag")

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Contact":
        """Build a contact from a stored MongoDB document."""
        return cls(
            id=str(document["_id"]),
            name=document["name"],
            email=document["email"],
            phone=document["phone"],
            favorite=document.get("favorite", False),
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "6501f3a1c2b84a1d2e3f4a5b",
                "name": "Allen Raymond",
                "email": "nulla.ante@vestibul.co.uk",
                "phone": "(992) 914-3792",
                "favorite": False
            }
        }
    }


class DeleteContactResponse(BaseModel):
    """Delete confirmation with the removed contact."""
    message: str = Field(
        default="Contact successfully deleted",
        description="Confirmation message"
    )
    contact: Contact = Field(..., description="Deleted contact")


class ErrorResponse(BaseModel):
    """Error response schema."""
    message: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )

    model_config = {
        "json_schema_extra": {
            "example": {"message": "Contact not found"}
        }
    }
