"""Shared pydantic configuration for request and response bodies."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose wire format is camelCase (``isActive``, ``classId``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
