"""Schema base - camelCase on the wire, snake_case in Python"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Accepts both camelCase and snake_case input, dumps camelCase
    (FastAPI serialises response models by alias).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class BlankToNoneModel(CamelModel):
    """Input model where "" means "clear this field" """

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: (None if isinstance(value, str) and value.strip() == "" else value)
                for key, value in data.items()
            }
        return data
