"""
API request and response models for the People API.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in people/models.py and
auth/models.py, which own the internal domain representation. Route handlers
map between the two.

Person bodies accept any subset of name/image/title and ignore unknown keys,
including username -- ownership is stamped server-side.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from people.models import Person

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class Credentials(BaseModel):
    """Request body for POST /signup and POST /login. Passwords are taken verbatim."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        """bcrypt only accepts 72 bytes of input; reject rather than truncate."""
        if len(value.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class PersonCreate(BaseModel):
    """Request body for POST /people. Every field is optional.

    Numbers are stored as their string form, the way a schemaless String field casts them.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: Optional[str] = None
    image: Optional[str] = None
    title: Optional[str] = None


class PersonUpdate(PersonCreate):
    """Request body for PUT /people/{id}. Only the keys sent are written."""


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class PersonResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str]
    image: Optional[str]
    title: Optional[str]
    username: Optional[str]
    created_at: str

    @classmethod
    def from_person(cls, person: Person) -> "PersonResponse":
        """Build a PersonResponse from a people.models.Person."""
        return cls(
            id=person.id,
            name=person.name,
            image=person.image,
            title=person.title,
            username=person.username,
            created_at=person.created_at,
        )


class UserResponse(BaseModel):
    """Public view of an account. The password hash is never part of it."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, created_at=user.created_at or "")


class HelloResponse(BaseModel):
    hello: str = "world"


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Structured error detail included in every error response."""

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope: {"error": {"code": ..., "message": ...}}."""

    error: ErrorDetail
