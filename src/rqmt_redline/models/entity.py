"""Versioned entity models: the typed field state of requirements and test cases."""

from enum import StrEnum

from pydantic import BaseModel


class EntityKind(StrEnum):
    """Kinds of entity that carry a version history."""

    REQUIREMENT = "requirement"
    TEST_CASE = "test_case"


class RequirementType(StrEnum):
    """Requirement level: customer, product or software requirement spec."""

    CRS = "CRS"
    PRS = "PRS"
    SRS = "SRS"


class RequirementStatus(StrEnum):
    """Lifecycle status of a requirement."""

    DRAFT = "Draft"
    APPROVED = "Approved"
    IMPLEMENTED = "Implemented"
    VERIFIED = "Verified"


class RequirementFields(BaseModel):
    """Full field state of a requirement at the moment it is saved."""

    type: RequirementType
    title: str
    description: str | None = None
    parent_id: int | None = None
    status: RequirementStatus = RequirementStatus.DRAFT


class TestCaseFields(BaseModel):
    """Full field state of a test case at the moment it is saved."""

    __test__ = False  # not a pytest test class

    title: str
    description: str | None = None
    steps: str | None = None
    expected_result: str | None = None
