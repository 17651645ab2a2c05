"""Base pydantic model for centralized configuration of schema definitions."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchemaModel(BaseModel):
    """Base pydantic model for centralized configuration of schema definitions.

    The console API speaks camelCase JSON; fields are declared in snake_case
    and accepted under either name.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
        str_strip_whitespace=True,
    )
