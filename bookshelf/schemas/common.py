"""Shared schema configuration."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bookshelf.database import MAX_ID

EntityId = Annotated[int, Field(ge=1, le=MAX_ID)]


class APIModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(APIModel):
    message: str
