"""
Pydantic schemas for the Blog API.

Request payloads are validated here before anything reaches the repository.
Pydantic collects every problem in one pass; the helpers below turn those
problems into a single ValidationError naming each offending field.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from apps.blog.models import TITLE_MAX_LENGTH
from apps.shared.errors import ValidationError

# Server-assigned fields; silently dropped from client payloads
SERVER_FIELDS = ("id", "created")


def _reject_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        raise ValueError("may not be null")
    if not value.strip():
        raise ValueError("may not be blank")
    return value


class AuthorSchema(BaseModel):
    """Author sub-object; both names are required."""
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)

    @field_validator("firstName", "lastName")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _reject_blank(value)


class PostCreate(BaseModel):
    """Schema for creating a new post."""
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=1)
    author: AuthorSchema

    @field_validator("title", "content")
    @classmethod
    def check_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _reject_blank(value)


class PostUpdate(BaseModel):
    """Schema for updating a post. All fields optional, but never null."""
    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(None, min_length=1)
    author: Optional[AuthorSchema] = None

    @field_validator("title", "content")
    @classmethod
    def check_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _reject_blank(value)

    @field_validator("author", mode="before")
    @classmethod
    def check_author_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may not be null")
        return value


def _violations(exc: PydanticValidationError) -> list[str]:
    fields = []
    for err in exc.errors():
        name = ".".join(str(part) for part in err["loc"])
        if name not in fields:
            fields.append(name)
    return fields


def validate_for_create(payload: Any) -> PostCreate:
    """
    Validate a creation payload.

    Raises ValidationError listing every missing or empty required field
    (title, content, author.firstName, author.lastName). Unknown keys as well
    as id/created are ignored.
    """
    if not isinstance(payload, dict):
        raise ValidationError(["body"])
    try:
        return PostCreate.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(_violations(exc)) from exc


def validate_for_update(payload: Any) -> dict[str, Any]:
    """
    Validate an update payload and return only the fields that were sent.

    id and created are stripped before validation. A present author must carry
    both names; it replaces the stored author as a whole.
    """
    if not isinstance(payload, dict):
        raise ValidationError(["body"])
    cleaned = {k: v for k, v in payload.items() if k not in SERVER_FIELDS}
    try:
        patch = PostUpdate.model_validate(cleaned)
    except PydanticValidationError as exc:
        raise ValidationError(_violations(exc)) from exc
    return patch.model_dump(exclude_unset=True)
