"""
Unit tests for contact request/response schemas.

Tests cover:
- Required fields on create
- Email and phone format validation
- Partial update semantics (unset vs. null)
- Strict boolean handling for the favorite flag
- Conversion from stored MongoDB documents
"""

import pytest
from bson import ObjectId
from pydantic import ValidationError

from api.src.models.contact import (
    Contact,
    CreateContactRequest,
    DeleteContactResponse,
    UpdateContactRequest,
    UpdateFavoriteRequest,
)


VALID = {
    "name": "Kennedy Lane",
    "email": "mattis.Cras@nonenimMauris.net",
    "phone": "(542) 451-7038",
}


class TestCreateContactRequest:
    """Create schema."""

    def test_accepts_valid_payload(self):
        request = CreateContactRequest(**VALID)

        assert request.name == "Kennedy Lane"
        assert request.phone == "(542) 451-7038"

    @pytest.mark.parametrize("field", ["name", "email", "phone"])
    def test_requires_each_field(self, field):
        data = {k: v for k, v in VALID.items() if k != field}

        with pytest.raises(ValidationError) as exc_info:
            CreateContactRequest(**data)

        errors = exc_info.value.errors()
        assert any(e["loc"] == (field,) and e["type"] == "missing" for e in errors)

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            CreateContactRequest(**{**VALID, "name": ""})

    @pytest.mark.parametrize("name", ["   ", "\t", " \n "])
    def test_rejects_blank_name(self, name):
        with pytest.raises(ValidationError) as exc_info:
            CreateContactRequest(**{**VALID, "name": name})

        assert exc_info.value.errors()[0]["loc"] == ("name",)

    def test_name_is_trimmed(self):
        assert CreateContactRequest(**{**VALID, "name": "  Kennedy Lane "}).name == "Kennedy Lane"

    @pytest.mark.parametrize("email", ["plainaddress", "@no-local.org", "a@b", "two@@signs.com"])
    def test_rejects_bad_email(self, email):
        with pytest.raises(ValidationError) as exc_info:
            CreateContactRequest(**{**VALID, "email": email})

        assert exc_info.value.errors()[0]["loc"] == ("email",)

    @pytest.mark.parametrize("phone", ["+1 (555) 010-9999", "380671234567", "555.010.9999"])
    def test_accepts_common_phone_formats(self, phone):
        assert CreateContactRequest(**{**VALID, "phone": phone}).phone == phone

    @pytest.mark.parametrize(
        "phone",
        [
            "12345",
            "phone-number",
            "+1 555 010 9999 ext 12",
            "1" * 21,
            "-------",
            "(((((((",
            ".......",
            "1234567\n",
            "555\t010\t9999",
        ],
    )
    def test_rejects_bad_phone(self, phone):
        with pytest.raises(ValidationError) as exc_info:
            CreateContactRequest(**{**VALID, "phone": phone})

        assert exc_info.value.errors()[0]["loc"] == ("phone",)

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateContactRequest(**VALID, favorite=True)

        assert exc_info.value.errors()[0]["type"] == "extra_forbidden"

    def test_rejects_non_string_name(self):
        with pytest.raises(ValidationError):
            CreateContactRequest(**{**VALID, "name": 123})


class TestUpdateContactRequest:
    """Partial update schema."""

    def test_empty_body_is_valid_but_has_no_changes(self):
        assert UpdateContactRequest().changes() == {}

    def test_changes_only_include_sent_fields(self):
        request = UpdateContactRequest(phone="(542) 451-7038", favorite=True)

        assert request.changes() == {"phone": "(542) 451-7038", "favorite": True}

    @pytest.mark.parametrize("field", ["name", "email", "phone", "favorite"])
    def test_rejects_explicit_null(self, field):
        with pytest.raises(ValidationError) as exc_info:
            UpdateContactRequest(**{field: None})

        assert exc_info.value.errors()[0]["loc"] == (field,)

    def test_validates_present_fields(self):
        with pytest.raises(ValidationError):
            UpdateContactRequest(email="nope")
        with pytest.raises(ValidationError):
            UpdateContactRequest(phone="x")

    def test_blank_name_is_rejected_and_names_are_trimmed(self):
        with pytest.raises(ValidationError):
            UpdateContactRequest(name="   ")

        assert UpdateContactRequest(name=" Kennedy ").changes() == {"name": "Kennedy"}

    def test_email_domain_is_normalized(self):
        request = UpdateContactRequest(email="mattis.Cras@NonEnimMauris.NET")

        assert request.changes() == {"email": "mattis.Cras@nonenimmauris.net"}

    def test_favorite_is_strict(self):
        with pytest.raises(ValidationError):
            UpdateContactRequest(favorite="true")

    def test_rejects_identifier_in_body(self):
        with pytest.raises(ValidationError):
            UpdateContactRequest(id=str(ObjectId()))


class TestUpdateFavoriteRequest:
    """Favorite toggle schema."""

    @pytest.mark.parametrize("value", [True, False])
    def test_accepts_booleans(self, value):
        assert UpdateFavoriteRequest(favorite=value).favorite is value

    @pytest.mark.parametrize("value", ["true", "false", 0, 1, None, "yes"])
    def test_rejects_non_booleans(self, value):
        with pytest.raises(ValidationError):
            UpdateFavoriteRequest(favorite=value)

    def test_requires_favorite(self):
        with pytest.raises(ValidationError):
            UpdateFavoriteRequest()


class TestContact:
    """Response model built from stored documents."""

    def test_from_document_renames_object_id(self):
        oid = ObjectId()
        contact = Contact.from_document({"_id": oid, **VALID, "favorite": True})

        assert contact.id == str(oid)
        assert contact.favorite is True
        assert contact.email == VALID["email"]

    def test_favorite_defaults_to_false(self):
        contact = Contact.from_document({"_id": ObjectId(), **VALID})

        assert contact.favorite is False

    def test_delete_response_has_default_message(self):
        contact = Contact.from_document({"_id": ObjectId(), **VALID})

        response = DeleteContactResponse(contact=contact)

        assert response.message == "Contact successfully deleted"
        assert response.model_dump()["contact"]["id"] == contact.id
