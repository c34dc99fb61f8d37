"""rm_record_version MCP tool — snapshot a requirement or test case after an edit."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import BaseModel, Field, ValidationError

from rqmt_redline.errors import EntityMismatchError, WriteConflictError
from rqmt_redline.models.entity import (
    EntityKind,
    RequirementFields,
    RequirementStatus,
    RequirementType,
    TestCaseFields,
)
from rqmt_redline.models.version import VersionedEntitySnapshot
from rqmt_redline.redline.versioning import VersioningService
from rqmt_redline.tools.formatters import format_version_full

logger = logging.getLogger(__name__)


def build_field_state(
    entity_kind: EntityKind,
    *,
    title: str,
    description: str | None = None,
    requirement_type: RequirementType | None = None,
    status: RequirementStatus | None = None,
    parent_id: int | None = None,
    steps: str | None = None,
    expected_result: str | None = None,
) -> BaseModel:
    """Build the typed field state for an entity kind from tool arguments.

    Raises ValueError if arguments for the other kind are supplied.
    """
    if EntityKind(entity_kind) == EntityKind.REQUIREMENT:
        if steps is not None or expected_result is not None:
            raise ValueError("steps and expected_result only apply to test cases")
        state: dict[str, object] = {
            "type": requirement_type,
            "title": title,
            "description": description,
            "parent_id": parent_id,
        }
        if status is not None:
            state["status"] = status
        return RequirementFields.model_validate(state)

    if requirement_type is not None or status is not None or parent_id is not None:
        raise ValueError("requirement_type, status and parent_id only apply to requirements")
    return TestCaseFields(
        title=title,
        description=description,
        steps=steps,
        expected_result=expected_result,
    )


def format_record_result(snapshot: VersionedEntitySnapshot) -> str:
    """Format the result of recording a version for the MCP response."""
    return f"Recorded v{snapshot.version_number}\n{format_version_full(snapshot)}"


async def record_version(
    versioning: VersioningService,
    entity_kind: EntityKind,
    entity_id: int,
    modified_by: int,
    **fields: object,
) -> str:
    """Validate the field state and record it, reporting errors as text."""
    try:
        state = build_field_state(entity_kind, **fields)  # type: ignore[arg-type]
    except ValidationError as e:
        return f"Error: invalid {EntityKind(entity_kind).value} fields\n{e}"
    except ValueError as e:
        return f"Error: {e}"

    try:
        snapshot = await versioning.record_version_with_retry(entity_id, state, modified_by)
    except (WriteConflictError, EntityMismatchError) as e:
        return f"Error: {e}"
    return format_record_result(snapshot)


def register_rm_record_version(mcp: FastMCP) -> None:
    """Register the rm_record_version tool with the MCP server."""

    @mcp.tool()
    async def rm_record_version(
        entity_kind: Annotated[EntityKind, Field(description="requirement or test_case")],
        entity_id: Annotated[int, Field(description="Id of the requirement or test case", ge=1)],
        modified_by: Annotated[int, Field(description="Id of the user who saved the edit")],
        title: Annotated[str, Field(description="Title after the edit")],
        description: Annotated[str | None, Field(description="Description after the edit")] = None,
        requirement_type: Annotated[
            RequirementType | None, Field(description="Requirements only: CRS, PRS or SRS")
        ] = None,
        status: Annotated[
            RequirementStatus | None,
            Field(description="Requirements only: Draft, Approved, Implemented, Verified"),
        ] = None,
        parent_id: Annotated[
            int | None, Field(description="Requirements only: parent requirement id")
        ] = None,
        steps: Annotated[str | None, Field(description="Test cases only: test steps")] = None,
        expected_result: Annotated[
            str | None, Field(description="Test cases only: expected result")
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Record a new version of a requirement or test case.

        Pass the FULL field state after the edit, not a patch. Every call
        appends a version, even if nothing changed since the last one.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        versioning: VersioningService = ctx.lifespan_context["versioning"]

        return await record_version(
            versioning,
            entity_kind,
            entity_id,
            modified_by,
            title=title,
            description=description,
            requirement_type=requirement_type,
            status=status,
            parent_id=parent_id,
            steps=steps,
            expected_result=expected_result,
        )
