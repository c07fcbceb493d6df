"""
Shared schema primitives used across the API.

Request and response bodies use camelCase keys on the wire (`userId`,
`progressAmount`, ...). Models subclass `CamelModel`, which accepts either
the alias or the Python field name on input and serializes by alias.
"""
from typing import Annotated, Any, Optional
from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


UserId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserRequest(CamelModel):
    """Body carrying only the caller's user id."""
    user_id: UserId = Field(description="Owning user identifier.")


class ErrorDetail(BaseModel):
    """A single field-level validation error."""
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None
