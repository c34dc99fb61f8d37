"""Per-kind field schemas: display order and string canonicalization.

Every field is reduced to ``str | None`` before it is stored or diffed, so
the redline engine never needs to know about enums or integers. Enum
members canonicalize to their name (``"Draft"``), never to an ordinal.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from rqmt_redline.errors import EntityMismatchError
from rqmt_redline.models.entity import EntityKind, RequirementFields, TestCaseFields


def canonical_string(value: object) -> str | None:
    """Canonical string form of a single field value."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class SchemaField:
    """A diffable field: its redline name and the state attribute it reads."""

    name: str
    attribute: str


@dataclass(frozen=True)
class EntitySchema:
    """Fixed field order and state model for one entity kind."""

    kind: EntityKind
    state_model: type[BaseModel]
    fields: tuple[SchemaField, ...]

    @property
    def field_names(self) -> list[str]:
        """Field names in redline order."""
        return [f.name for f in self.fields]

    def canonicalize(self, state: BaseModel) -> dict[str, str | None]:
        """Reduce a typed field state to canonical strings, in schema order."""
        if not isinstance(state, self.state_model):
            raise EntityMismatchError(
                f"{type(state).__name__} is not a {self.kind.value} field state"
            )
        return {f.name: canonical_string(getattr(state, f.attribute)) for f in self.fields}


REQUIREMENT_SCHEMA = EntitySchema(
    kind=EntityKind.REQUIREMENT,
    state_model=RequirementFields,
    fields=(
        SchemaField("Type", "type"),
        SchemaField("Title", "title"),
        SchemaField("Description", "description"),
        SchemaField("ParentId", "parent_id"),
        SchemaField("Status", "status"),
    ),
)

TEST_CASE_SCHEMA = EntitySchema(
    kind=EntityKind.TEST_CASE,
    state_model=TestCaseFields,
    fields=(
        SchemaField("Title", "title"),
        SchemaField("Description", "description"),
        SchemaField("Steps", "steps"),
        SchemaField("ExpectedResult", "expected_result"),
    ),
)

_SCHEMAS: dict[EntityKind, EntitySchema] = {
    EntityKind.REQUIREMENT: REQUIREMENT_SCHEMA,
    EntityKind.TEST_CASE: TEST_CASE_SCHEMA,
}


def schema_for(kind: EntityKind | str) -> EntitySchema:
    """Look up the schema for an entity kind."""
    return _SCHEMAS[EntityKind(kind)]


def schema_for_state(state: BaseModel) -> EntitySchema:
    """Look up the schema whose state model matches ``state``."""
    for schema in _SCHEMAS.values():
        if isinstance(state, schema.state_model):
            return schema
    raise EntityMismatchError(f"No versioned entity schema for {type(state).__name__}")
