"""Shared base model for API schemas (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input; serializes camelCase by alias."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
