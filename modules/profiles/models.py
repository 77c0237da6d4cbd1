"""
Profile module data models.

ProfileFields is the editable form and carries the validation rules.
ProfileRecord is what the remote store persists, keyed by user ID.
"""

from datetime import datetime
from typing import Optional

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

USERNAME_MIN_LENGTH = 2
USERNAME_TOO_SHORT_MESSAGE = "Username must be at least 2 characters."
INVALID_URL_MESSAGE = "Please enter a valid URL"

_url_adapter = TypeAdapter(AnyUrl)


def _check_optional_url(value: str) -> str:
    """Accept an empty string or an absolute URL, returned unchanged."""
    if value == "":
        return value
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        raise PydanticCustomError("invalid_url", INVALID_URL_MESSAGE)
    return value


class ProfileFields(BaseModel):
    """Validated values of the profile form."""

    username: str = Field(..., description="Public display name")
    website: str = Field(default="", description="Personal website, or empty")
    avatar_url: str = Field(default="", description="Avatar image URL, or empty")

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        if len(value) < USERNAME_MIN_LENGTH:
            raise PydanticCustomError("username_too_short", USERNAME_TOO_SHORT_MESSAGE)
        return value

    @field_validator("website", "avatar_url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return _check_optional_url(value)


class ProfileRecord(BaseModel):
    """
    A persisted profile.

    One record per user. Missing columns read back as empty strings so
    nothing null ever reaches the form.
    """

    user_id: str = Field(..., description="Owner's user ID (the row key)")
    username: str = Field(default="", description="Public display name")
    website: str = Field(default="", description="Personal website, or empty")
    avatar_url: str = Field(default="", description="Avatar image URL, or empty")
    updated_at: Optional[datetime] = Field(None, description="Last write time (ordering hint)")

    model_config = {"frozen": True}

    @field_validator("username", "website", "avatar_url", mode="before")
    @classmethod
    def none_as_empty(cls, value: Optional[str]) -> str:
        return value or ""

    def to_fields(self) -> dict[str, str]:
        """Editable values of this record."""
        return {
            "username": self.username,
            "website": self.website,
            "avatar_url": self.avatar_url,
        }


def empty_fields() -> dict[str, str]:
    """Form values for a user who has no profile yet."""
    return {"username": "", "website": "", "avatar_url": ""}
