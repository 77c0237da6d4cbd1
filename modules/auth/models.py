"""
Authentication module data models.

These models define the sign-in form and the validation rules applied to
it before anything reaches the identity provider.
"""

from pydantic import BaseModel, EmailStr, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

INVALID_EMAIL_MESSAGE = "Please enter a valid email address."

# Never part of a bare address; rules out "Name <addr>" and quoted forms
_DISALLOWED_CHARS = frozenset("<>()[]\\,;:\"")

_email_adapter = TypeAdapter(EmailStr)


class EmailInput(BaseModel):
    """The value submitted to the sign-in flow."""

    email: str = Field(..., description="Address the magic link is sent to")

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        # bare local-part "@" dotted domain, no whitespace or display-name syntax
        if any(ch.isspace() or ch in _DISALLOWED_CHARS for ch in value):
            raise PydanticCustomError("invalid_email", INVALID_EMAIL_MESSAGE)
        local, sep, domain = value.rpartition("@")
        if not sep or not local or "." not in domain:
            raise PydanticCustomError("invalid_email", INVALID_EMAIL_MESSAGE)
        try:
            _email_adapter.validate_python(value)
        except PydanticValidationError:
            raise PydanticCustomError("invalid_email", INVALID_EMAIL_MESSAGE)
        return value
