from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

TITLE_MAX_LENGTH = 255


class BlogPayload(BaseModel):
    """Body of a create or update request."""

    title: str = ""
    content: str = ""

    @field_validator("title", "content", mode="before")
    @classmethod
    def as_trimmed_string(cls, v: Any, info: ValidationInfo) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise PydanticCustomError("string_type", "The {field} field must be a string.", {"field": info.field_name})
        return v.strip()

    @field_validator("title")
    @classmethod
    def title_rules(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("required", "The title field is required.")
        if len(v) > TITLE_MAX_LENGTH:
            raise PydanticCustomError(
                "max_length",
                "The title field must not be greater than {max} characters.",
                {"max": TITLE_MAX_LENGTH},
            )
        return v

    @field_validator("content")
    @classmethod
    def content_required(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("required", "The content field is required.")
        return v


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a pydantic error into ``{field: first message}``."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err.get("loc") else "__root__"
        errors.setdefault(field, err["msg"])
    return errors
