"""Base model for backend wire payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Model with camelCase JSON field names.

    The backend speaks camelCase; Python code uses snake_case attributes.
    Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Serialize for a request body, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
