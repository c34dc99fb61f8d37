"""Tests for the rm_redline MCP tool."""

import json

import pytest

from rqmt_redline.models.entity import (
    EntityKind,
    RequirementFields,
    RequirementStatus,
    RequirementType,
)
from rqmt_redline.tools.rm_redline import redline


async def _two_versions(versioning):
    base = {"type": RequirementType.PRS, "title": "Login"}
    await versioning.record_version(1, RequirementFields(**base), modified_by=1)
    await versioning.record_version(
        1,
        RequirementFields(**base, status=RequirementStatus.APPROVED, description="SSO"),
        modified_by=2,
    )


@pytest.mark.asyncio
async def test_redline_json(versioning):
    await _two_versions(versioning)
    payload = json.loads(await redline(versioning, EntityKind.REQUIREMENT, 1, 1, 2))
    assert payload == {
        "oldVersion": 1,
        "newVersion": 2,
        "changes": [
            {"field": "Description", "oldValue": None, "newValue": "SSO", "changeType": "Added"},
            {
                "field": "Status",
                "oldValue": "Draft",
                "newValue": "Approved",
                "changeType": "Modified",
            },
        ],
    }


@pytest.mark.asyncio
async def test_redline_text(versioning):
    await _two_versions(versioning)
    text = await redline(versioning, EntityKind.REQUIREMENT, 1, 1, 2, as_text=True)
    assert text.splitlines() == [
        "Redline v1 -> v2",
        "2 change(s)",
        "  + Description: SSO",
        "  ~ Status: Draft -> Approved",
    ]


@pytest.mark.asyncio
async def test_redline_missing_version(versioning):
    await _two_versions(versioning)
    text = await redline(versioning, EntityKind.REQUIREMENT, 1, 1, 5)
    assert text == "Error: requirement 1 has no version 5"
