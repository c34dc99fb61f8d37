"""rm_links MCP tool — requirement trace links and test-case coverage."""

import logging
from enum import StrEnum
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from rqmt_redline.config import is_manager_mode
from rqmt_redline.errors import DuplicateLinkError
from rqmt_redline.models.link import LinkDirection
from rqmt_redline.store.link_store import TraceLinkStore
from rqmt_redline.tools.formatters import format_result_list, format_trace_link

logger = logging.getLogger(__name__)


class LinkAction(StrEnum):
    """Actions accepted by rm_links."""

    LIST = "list"
    LINK = "link"
    UNLINK = "unlink"
    COVER = "cover"
    UNCOVER = "uncover"


_WRITE_ACTIONS = {LinkAction.LINK, LinkAction.UNLINK, LinkAction.COVER, LinkAction.UNCOVER}


async def _list_links(
    links: TraceLinkStore,
    requirement_id: int | None,
    test_case_id: int | None,
    direction: LinkDirection,
) -> str:
    if requirement_id is not None:
        trace = await links.get_trace_links(requirement_id, direction)
        covering = await links.get_test_cases_for_requirement(requirement_id)
        items = [format_trace_link(link) for link in trace]
        note = (
            f"covered by test cases {', '.join(str(t) for t in covering)}"
            if covering
            else "no covering test cases"
        )
        if not items:
            return f"Requirement {requirement_id}: no trace links; {note}"
        return format_result_list(items, header=f"Requirement {requirement_id}", note=note)

    if test_case_id is not None:
        covered = await links.get_requirements_for_test_case(test_case_id)
        if not covered:
            return f"Test case {test_case_id} covers no requirements."
        return f"Test case {test_case_id} covers requirements {', '.join(str(r) for r in covered)}"

    return "Error: requirement_id or test_case_id is required for list."


async def manage_links(
    links: TraceLinkStore,
    action: LinkAction,
    *,
    requirement_id: int | None = None,
    target_requirement_id: int | None = None,
    test_case_id: int | None = None,
    link_type: str | None = None,
    link_id: int | None = None,
    direction: LinkDirection = LinkDirection.BOTH,
    allow_writes: bool = True,
) -> str:
    """Dispatch one link action, reporting domain errors as text."""
    action = LinkAction(action)
    if action in _WRITE_ACTIONS and not allow_writes:
        return f"Error: '{action.value}' requires manager mode (RM_MANAGER=TRUE)."

    if action == LinkAction.LIST:
        return await _list_links(links, requirement_id, test_case_id, direction)

    if action == LinkAction.LINK:
        if requirement_id is None or target_requirement_id is None or not link_type:
            return "Error: link requires requirement_id, target_requirement_id and link_type."
        try:
            link = await links.add_trace_link(requirement_id, target_requirement_id, link_type)
        except (DuplicateLinkError, ValueError) as e:
            return f"Error: {e}"
        return f"Linked {format_trace_link(link)}"

    if action == LinkAction.UNLINK:
        if link_id is None:
            return "Error: unlink requires link_id."
        if await links.remove_trace_link(link_id):
            return f"Removed trace link #{link_id}"
        return f"Error: trace link #{link_id} not found."

    if requirement_id is None or test_case_id is None:
        return f"Error: {action.value} requires requirement_id and test_case_id."

    if action == LinkAction.COVER:
        try:
            await links.add_coverage_link(requirement_id, test_case_id)
        except DuplicateLinkError as e:
            return f"Error: {e}"
        return f"Test case {test_case_id} now covers requirement {requirement_id}"

    if await links.remove_coverage_link(requirement_id, test_case_id):
        return f"Test case {test_case_id} no longer covers requirement {requirement_id}"
    return f"Error: test case {test_case_id} does not cover requirement {requirement_id}."


def register_rm_links(mcp: FastMCP) -> None:
    """Register the rm_links tool with the MCP server."""

    @mcp.tool()
    async def rm_links(
        action: Annotated[
            LinkAction,
            Field(description="list, link, unlink, cover, uncover"),
        ] = LinkAction.LIST,
        requirement_id: Annotated[
            int | None, Field(description="Requirement to list, or source of a link")
        ] = None,
        target_requirement_id: Annotated[
            int | None, Field(description="link: requirement the trace link points to")
        ] = None,
        test_case_id: Annotated[
            int | None, Field(description="cover/uncover, or list a test case's requirements")
        ] = None,
        link_type: Annotated[
            str | None, Field(description="link: trace link type, e.g. CRS-PRS or SRS-PRS")
        ] = None,
        link_id: Annotated[int | None, Field(description="unlink: id of the trace link")] = None,
        direction: Annotated[
            LinkDirection, Field(description="list: outgoing, incoming or both")
        ] = LinkDirection.BOTH,
        ctx: Context | None = None,
    ) -> str:
        """Inspect and maintain traceability between requirements and test cases.

        Trace links are directed requirement-to-requirement links (e.g. CRS-PRS).
        Coverage links record which test cases verify a requirement.
        Write actions are only available in manager mode.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        links: TraceLinkStore = ctx.lifespan_context["links"]

        return await manage_links(
            links,
            action,
            requirement_id=requirement_id,
            target_requirement_id=target_requirement_id,
            test_case_id=test_case_id,
            link_type=link_type,
            link_id=link_id,
            direction=direction,
            allow_writes=is_manager_mode(),
        )
