"""Redline (field-level diff) result models.

Serialized with ``by_alias=True`` these produce the camelCase shape consumed
by the UI layer: ``{oldVersion, newVersion, changes: [{field, oldValue,
newValue, changeType}]}``.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ChangeType(StrEnum):
    """Classification of a single field difference."""

    ADDED = "Added"
    REMOVED = "Removed"
    MODIFIED = "Modified"


class FieldChange(BaseModel):
    """One field's difference between two versions."""

    model_config = ConfigDict(frozen=True)

    field: str
    old_value: str | None = Field(default=None, serialization_alias="oldValue")
    new_value: str | None = Field(default=None, serialization_alias="newValue")
    change_type: ChangeType = Field(serialization_alias="changeType")


class RedlineResult(BaseModel):
    """Changes between two versions of one entity, in schema field order."""

    old_version: int = Field(serialization_alias="oldVersion")
    new_version: int = Field(serialization_alias="newVersion")
    changes: list[FieldChange] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize to the camelCase wire shape."""
        return self.model_dump_json(by_alias=True)
