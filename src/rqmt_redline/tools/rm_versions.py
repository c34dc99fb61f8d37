"""rm_versions MCP tool — version history of a requirement or test case."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from rqmt_redline.errors import VersionNotFoundError
from rqmt_redline.models.entity import EntityKind
from rqmt_redline.redline.versioning import VersioningService
from rqmt_redline.tools.formatters import (
    format_result_list,
    format_version_compact,
    format_version_full,
)

logger = logging.getLogger(__name__)


async def list_versions(
    versioning: VersioningService,
    entity_kind: EntityKind,
    entity_id: int,
    version_number: int | None = None,
) -> str:
    """History listing, or one version in full when a number is given."""
    if version_number is not None:
        try:
            snapshot = await versioning.get_version(entity_kind, entity_id, version_number)
        except VersionNotFoundError as e:
            return f"Error: {e}"
        return format_version_full(snapshot)

    history = await versioning.get_history(entity_kind, entity_id)
    return format_result_list(
        [format_version_compact(s) for s in history],
        header=f"History of {EntityKind(entity_kind).value} {entity_id}",
    )


def register_rm_versions(mcp: FastMCP) -> None:
    """Register the rm_versions tool with the MCP server."""

    @mcp.tool()
    async def rm_versions(
        entity_kind: Annotated[EntityKind, Field(description="requirement or test_case")],
        entity_id: Annotated[int, Field(description="Id of the requirement or test case")],
        version_number: Annotated[
            int | None,
            Field(description="Show this version in full instead of the history list", ge=1),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """List the versions of a requirement or test case, oldest first.

        Use version_number to read one snapshot with every field.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        versioning: VersioningService = ctx.lifespan_context["versioning"]
        return await list_versions(versioning, entity_kind, entity_id, version_number)
