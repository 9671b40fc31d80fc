"""Shared configuration for canonical transport models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CanonicalModel(BaseModel):
    """Immutable model serialized with the upstream camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict:
        """Dump using wire (camelCase) names."""
        return self.model_dump(by_alias=True, mode="json")
