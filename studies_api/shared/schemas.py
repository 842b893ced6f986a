"""Shared schema base classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class PascalModel(BaseModel):
    """Schema whose wire names are PascalCase (``AccessToken``, ``TagId``).

    snake_case field names are accepted on input as well, and ORM objects can
    be validated directly.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, from_attributes=True)
