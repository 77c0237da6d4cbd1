"""
Form validation helpers.

Form models are plain Pydantic models; these helpers turn Pydantic's
error list into one message per field.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)


def field_errors_from(error: PydanticValidationError) -> dict[str, str]:
    """
    Map a Pydantic validation error to ``{field: message}``.

    Only the first message for each field is kept.
    """
    field_errors: dict[str, str] = {}
    for item in error.errors():
        loc = item.get("loc") or ("__root__",)
        field = str(loc[0])
        field_errors.setdefault(field, item["msg"])
    return field_errors


def validate_form(model: Type[M], data: Any) -> M:
    """
    Validate raw form values against a form model.

    Args:
        model: Pydantic model describing the form
        data: Mapping of field name to raw value, or a model instance

    Returns:
        Validated model instance

    Raises:
        ValidationError: With per-field messages if any field is invalid
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(field_errors_from(e)) from e
