"""
Request and response models for user profiles and saved resources.

Every free-text field is sanitized inside its validator, so a request model
that validates only ever carries SanitizedText into the ORM layer. Raw
lengths are checked first, then the sanitized value is capped to its column
size (entity encoding can make it longer than the raw input).
"""

from __future__ import annotations

import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from Security.feature_xss_sanitization import OutputContext, clean_field, sanitize_for_context
from Security.input_validation import (
    STATE_CODE_PATTERN,
    ZIP_CODE_PATTERN,
    strip_control_chars,
    validate_allowlist,
)
from Security.sanitizer_config import SANITIZER_SETTINGS

NAME_MAX = SANITIZER_SETTINGS["NAME_MAX_LENGTH"]
ADDRESS_MAX = SANITIZER_SETTINGS["ADDRESS_LINE_MAX_LENGTH"]
CITY_MAX = SANITIZER_SETTINGS["CITY_MAX_LENGTH"]
ZIP_MAX = SANITIZER_SETTINGS["ZIP_MAX_LENGTH"]
NOTES_MAX = SANITIZER_SETTINGS["NOTES_MAX_LENGTH"]

EMAIL_PATTERN = r"[^@\s<>\"'/]+@[^@\s<>\"'/]+\.[^@\s<>\"'/]+"

_COLUMN_LIMITS = {
    "first_name": NAME_MAX,
    "last_name": NAME_MAX,
    "address_line1": ADDRESS_MAX,
    "address_line2": ADDRESS_MAX,
    "city": CITY_MAX,
    "notes": NOTES_MAX,
}


def _clean_text(field: str, value: Optional[str]) -> Optional[str]:
    value = strip_control_chars(value)
    if value is None:
        return None
    return clean_field(field, value.strip(), OutputContext.PLAIN_TEXT, _COLUMN_LIMITS[field])


def _clean_required_name(field: str, value: str) -> str:
    cleaned = _clean_text(field, value)
    if not cleaned:
        raise ValueError(f"{field} must contain visible text")
    return cleaned


def _clean_state(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if validate_allowlist(value.strip(), STATE_CODE_PATTERN) is None:
        raise ValueError("State must be exactly 2 letters")
    return value.strip().upper()


def _clean_zip(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if validate_allowlist(value.strip(), ZIP_CODE_PATTERN) is None:
        raise ValueError("Zip code must be 12345 or 12345-6789")
    return value.strip()


# ----------------------------------------
# USERS
# ----------------------------------------


class CreateUserRequest(BaseModel):
    email: str = Field(..., max_length=255)
    first_name: str = Field(..., min_length=1, max_length=NAME_MAX)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        value = value.strip().lower()
        if validate_allowlist(value, EMAIL_PATTERN) is None:
            raise ValueError("Email must be a valid address")
        return value

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, value: str, info) -> str:
        return _clean_required_name(info.field_name, value)


class UpdateAddressRequest(BaseModel):
    address_line1: Optional[str] = Field(None, max_length=ADDRESS_MAX)
    address_line2: Optional[str] = Field(None, max_length=ADDRESS_MAX)
    city: Optional[str] = Field(None, max_length=CITY_MAX)
    state: Optional[str] = Field(None, max_length=2)
    zip_code: Optional[str] = Field(None, max_length=ZIP_MAX)
    is_homeless: Optional[bool] = None

    @field_validator("address_line1", "address_line2", "city")
    @classmethod
    def _address_text(cls, value: Optional[str], info) -> Optional[str]:
        return _clean_text(info.field_name, value)

    @field_validator("state")
    @classmethod
    def _state(cls, value: Optional[str]) -> Optional[str]:
        return _clean_state(value)

    @field_validator("zip_code")
    @classmethod
    def _zip(cls, value: Optional[str]) -> Optional[str]:
        return _clean_zip(value)

    def is_clearing_address(self) -> bool:
        return (
            self.address_line1 is None
            and self.address_line2 is None
            and self.city is None
            and self.state is None
            and self.zip_code is None
        )

    def is_complete_address(self) -> bool:
        return all(bool(v and v.strip()) for v in (self.address_line1, self.city, self.state, self.zip_code))


class UpdateUserRequest(UpdateAddressRequest):
    first_name: Optional[str] = Field(None, max_length=NAME_MAX)
    last_name: Optional[str] = Field(None, max_length=NAME_MAX)

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, value: Optional[str], info) -> Optional[str]:
        if value is None:
            return None
        return _clean_required_name(info.field_name, value)

    def has_any_updates(self) -> bool:
        return bool(self.model_dump(exclude_unset=True))


class UserProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    is_homeless: bool = False


# ----------------------------------------
# SAVED RESOURCES
# ----------------------------------------


class SaveResourceRequest(BaseModel):
    resource_id: uuid.UUID
    notes: Optional[str] = Field(None, max_length=NOTES_MAX)

    @field_validator("notes")
    @classmethod
    def _notes(cls, value: Optional[str]) -> Optional[str]:
        return _clean_text("notes", value) or None

    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())


class UpdateSavedResourceNotesRequest(BaseModel):
    """Null or blank notes clear the stored notes."""

    notes: Optional[str] = Field(None, max_length=NOTES_MAX)

    @field_validator("notes")
    @classmethod
    def _notes(cls, value: Optional[str]) -> Optional[str]:
        return _clean_text("notes", value) or None

    def is_clearing_notes(self) -> bool:
        return self.notes is None


class SavedResourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    resource_id: str
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    @computed_field
    @property
    def notes_html(self) -> Optional[str]:
        # Render-tier pass, independent of the write-path sanitizer.
        return sanitize_for_context(self.notes, OutputContext.MARKUP)


# ----------------------------------------
# SANITIZE PREVIEW
# ----------------------------------------


class SanitizePreviewRequest(BaseModel):
    text: Optional[str] = Field(None, max_length=NOTES_MAX)
    context: OutputContext = OutputContext.PLAIN_TEXT


class SanitizePreviewResponse(BaseModel):
    context: OutputContext
    sanitized: Optional[str] = None
    modified: bool
    threats: list[str] = []
