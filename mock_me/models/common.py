"""
Shared base for API models.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """API model serialized with camelCase keys, accepting either casing on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True
