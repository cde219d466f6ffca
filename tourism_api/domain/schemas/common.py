from typing import Generic, Optional, TypeVar

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# request bodies accept both snake_case and the web client's camelCase; responses stay snake_case
CAMEL_INPUT = ConfigDict(alias_generator=AliasGenerator(validation_alias=to_camel), populate_by_name=True)


class Envelope(BaseModel, Generic[T]):
    """Response wrapper shared by every JSON route."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class EmailsSent(BaseModel):
    admin: bool
    user: bool


class ContactEmailsSent(BaseModel):
    admin: bool
    client: bool
