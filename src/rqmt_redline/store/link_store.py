"""Traceability links between requirements and test cases."""

import logging

from rqmt_redline.db.backend import Database
from rqmt_redline.db.queries import (
    delete_coverage_link,
    delete_trace_link,
    get_covered_requirements,
    get_covering_test_cases,
    get_trace_links,
    insert_coverage_link,
    insert_trace_link,
)
from rqmt_redline.models.link import CoverageLink, LinkDirection, TraceLink

logger = logging.getLogger(__name__)


class TraceLinkStore:
    """Requirement trace links (e.g. CRS-PRS) and test-case coverage links."""

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db

    async def add_trace_link(
        self, from_requirement_id: int, to_requirement_id: int, link_type: str
    ) -> TraceLink:
        """Link two requirements. Raises DuplicateLinkError if already linked."""
        if from_requirement_id == to_requirement_id:
            raise ValueError(f"Requirement {from_requirement_id} cannot link to itself")
        link_type = link_type.strip()
        if not link_type:
            raise ValueError("link_type is required")
        link = await insert_trace_link(self.db, from_requirement_id, to_requirement_id, link_type)
        logger.info(
            "Linked requirement %d -> %d (%s)", from_requirement_id, to_requirement_id, link_type
        )
        return link

    async def remove_trace_link(self, link_id: int) -> bool:
        """Remove a trace link by id."""
        return await delete_trace_link(self.db, link_id)

    async def get_trace_links(
        self, requirement_id: int, direction: LinkDirection = LinkDirection.BOTH
    ) -> list[TraceLink]:
        """Trace links from and/or to a requirement."""
        direction = LinkDirection(direction)
        return await get_trace_links(
            self.db,
            requirement_id,
            outgoing=direction in (LinkDirection.OUTGOING, LinkDirection.BOTH),
            incoming=direction in (LinkDirection.INCOMING, LinkDirection.BOTH),
        )

    async def add_coverage_link(self, requirement_id: int, test_case_id: int) -> CoverageLink:
        """Record that a test case covers a requirement."""
        link = await insert_coverage_link(self.db, requirement_id, test_case_id)
        logger.info("Test case %d now covers requirement %d", test_case_id, requirement_id)
        return link

    async def remove_coverage_link(self, requirement_id: int, test_case_id: int) -> bool:
        """Remove a coverage link."""
        return await delete_coverage_link(self.db, requirement_id, test_case_id)

    async def get_test_cases_for_requirement(self, requirement_id: int) -> list[int]:
        """Ids of test cases covering a requirement."""
        return await get_covering_test_cases(self.db, requirement_id)

    async def get_requirements_for_test_case(self, test_case_id: int) -> list[int]:
        """Ids of requirements a test case covers."""
        return await get_covered_requirements(self.db, test_case_id)
