"""
Base schemas shared by all models.
"""

from pydantic import BaseModel, ConfigDict, AliasChoices, Field
from typing import Any


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


def camel_field(name: str, default: Any = ..., **kwargs) -> Any:
    """
    Field that accepts both the snake_case name and its camelCase twin on input.

    The dashboard client sends camelCase (currentStock), the database returns
    snake_case (current_stock). Output always uses the snake_case name.
    """
    head, *rest = name.split("_")
    camel = head + "".join(part.capitalize() for part in rest)
    if "default_factory" not in kwargs:
        kwargs["default"] = default
    return Field(
        validation_alias=AliasChoices(name, camel),
        **kwargs
    )
