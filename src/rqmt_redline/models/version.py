"""Entity version models."""

from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rqmt_redline.models.entity import EntityKind


class VersionedEntitySnapshot(BaseModel):
    """An immutable snapshot of an entity's canonical fields at one version.

    Field values are held as ``(name, value)`` pairs so the snapshot cannot
    be edited in place; ``as_dict()`` hands out a fresh copy.
    """

    model_config = ConfigDict(frozen=True)

    entity_kind: EntityKind
    entity_id: int
    version_number: int = Field(ge=1)
    field_values: tuple[tuple[str, str | None], ...] = ()
    modified_by: int
    modified_at: datetime

    @field_validator("field_values", mode="before")
    @classmethod
    def _pairs_from_mapping(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    def get(self, name: str) -> str | None:
        """Canonical value of one field, or None if absent."""
        for field_name, value in self.field_values:
            if field_name == name:
                return value
        return None

    def as_dict(self) -> dict[str, str | None]:
        """Copy of the field values as a name → value mapping."""
        return dict(self.field_values)
