"""Traceability link models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel


class LinkDirection(StrEnum):
    """Which side of a requirement's trace links to return."""

    OUTGOING = "outgoing"
    INCOMING = "incoming"
    BOTH = "both"


class TraceLink(BaseModel):
    """A directed trace link between two requirements (e.g. CRS-PRS)."""

    id: int
    from_requirement_id: int
    to_requirement_id: int
    link_type: str
    created_at: datetime | None = None


class CoverageLink(BaseModel):
    """A link recording that a test case covers a requirement."""

    requirement_id: int
    test_case_id: int
    created_at: datetime | None = None
