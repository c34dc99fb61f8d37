"""rm_redline MCP tool — field-level diff between two versions."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from rqmt_redline.errors import EntityMismatchError, InvalidComparisonError, VersionNotFoundError
from rqmt_redline.models.entity import EntityKind
from rqmt_redline.redline.versioning import VersioningService
from rqmt_redline.tools.formatters import format_redline

logger = logging.getLogger(__name__)


async def redline(
    versioning: VersioningService,
    entity_kind: EntityKind,
    entity_id: int,
    old_version: int,
    new_version: int,
    as_text: bool = False,
) -> str:
    """Redline as JSON (default) or readable text; errors as text."""
    try:
        result = await versioning.get_redline(entity_kind, entity_id, old_version, new_version)
    except (VersionNotFoundError, InvalidComparisonError, EntityMismatchError) as e:
        return f"Error: {e}"
    return format_redline(result) if as_text else result.to_json()


def register_rm_redline(mcp: FastMCP) -> None:
    """Register the rm_redline tool with the MCP server."""

    @mcp.tool()
    async def rm_redline(
        entity_kind: Annotated[EntityKind, Field(description="requirement or test_case")],
        entity_id: Annotated[int, Field(description="Id of the requirement or test case")],
        old_version: Annotated[int, Field(description="Earlier version number", ge=1)],
        new_version: Annotated[int, Field(description="Later version number", ge=1)],
        as_text: Annotated[
            bool, Field(description="Return a readable summary instead of JSON")
        ] = False,
        ctx: Context | None = None,
    ) -> str:
        """Compare two versions of a requirement or test case field by field.

        Returns {oldVersion, newVersion, changes: [{field, oldValue, newValue,
        changeType}]} where changeType is Added, Removed or Modified. Unchanged
        fields are omitted. Fields appear in a fixed order per entity kind.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        versioning: VersioningService = ctx.lifespan_context["versioning"]
        return await redline(versioning, entity_kind, entity_id, old_version, new_version, as_text)
