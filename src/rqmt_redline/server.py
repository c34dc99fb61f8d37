"""FastMCP server with lifespan management and tool registration."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from rqmt_redline.config import get_db_path, get_log_level
from rqmt_redline.db.connection import create_connection
from rqmt_redline.redline.versioning import VersioningService
from rqmt_redline.store.link_store import TraceLinkStore
from rqmt_redline.store.version_store import VersionStore
from rqmt_redline.tools.rm_links import register_rm_links
from rqmt_redline.tools.rm_record_version import register_rm_record_version
from rqmt_redline.tools.rm_redline import register_rm_redline
from rqmt_redline.tools.rm_versions import register_rm_versions


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Manage the database connection lifecycle."""
    # Log to stderr (stdout is MCP stdio transport)
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    db_path = get_db_path()
    logger.info("Opening database at %s", db_path)
    db = await create_connection(db_path)

    try:
        yield {
            "db": db,
            "versioning": VersioningService(VersionStore(db)),
            "links": TraceLinkStore(db),
        }
    finally:
        await db.close()
        logger.info("Database connection closed")


_INSTRUCTIONS = """\
Version history and redlines for requirements and test cases.

RECORDING — call rm_record_version after every save of a requirement or \
test case, passing the FULL field state after the edit. Versions are \
numbered 1, 2, 3... per entity and are never changed once recorded.

COMPARING:
- rm_versions: list an entity's versions, or read one version in full.
- rm_redline: field-level diff between two versions. Each changed field is \
reported as Added, Removed or Modified; unchanged fields are omitted.

TRACEABILITY:
- rm_links: list trace links (e.g. CRS-PRS, SRS-PRS) and the test cases \
covering a requirement.

Requirement fields: Type (CRS/PRS/SRS), Title, Description, ParentId, \
Status (Draft/Approved/Implemented/Verified).
Test case fields: Title, Description, Steps, ExpectedResult.
"""


def create_server() -> FastMCP:
    """Create and configure the MCP server with all tools."""
    mcp = FastMCP(
        "rqmt-redline",
        instructions=_INSTRUCTIONS,
        lifespan=lifespan,
    )

    register_rm_record_version(mcp)
    register_rm_versions(mcp)
    register_rm_redline(mcp)
    register_rm_links(mcp)

    return mcp
