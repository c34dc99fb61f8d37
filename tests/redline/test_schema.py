"""Tests for entity schemas and canonicalization."""

import pytest
from pydantic import BaseModel

from rqmt_redline.errors import EntityMismatchError
from rqmt_redline.models.entity import (
    EntityKind,
    RequirementFields,
    RequirementStatus,
    RequirementType,
    TestCaseFields,
)
from rqmt_redline.redline.schema import (
    REQUIREMENT_SCHEMA,
    TEST_CASE_SCHEMA,
    canonical_string,
    schema_for,
    schema_for_state,
)


class _Unversioned(BaseModel):
    name: str


def test_requirement_field_order():
    assert REQUIREMENT_SCHEMA.field_names == ["Type", "Title", "Description", "ParentId", "Status"]


def test_test_case_field_order():
    assert TEST_CASE_SCHEMA.field_names == ["Title", "Description", "Steps", "ExpectedResult"]


def test_canonical_string():
    assert canonical_string(None) is None
    assert canonical_string("text") == "text"
    assert canonical_string(42) == "42"
    assert canonical_string(RequirementStatus.APPROVED) == "Approved"
    assert canonical_string(RequirementType.SRS) == "SRS"


def test_canonicalize_requirement_uses_enum_names():
    state = RequirementFields(
        type=RequirementType.PRS,
        title="Login",
        parent_id=4,
        status=RequirementStatus.IMPLEMENTED,
    )
    assert REQUIREMENT_SCHEMA.canonicalize(state) == {
        "Type": "PRS",
        "Title": "Login",
        "Description": None,
        "ParentId": "4",
        "Status": "Implemented",
    }


def test_canonicalize_preserves_schema_order():
    state = TestCaseFields(title="T", expected_result="pass", steps="1. open")
    assert list(TEST_CASE_SCHEMA.canonicalize(state)) == TEST_CASE_SCHEMA.field_names


def test_canonicalize_rejects_wrong_state():
    with pytest.raises(EntityMismatchError):
        REQUIREMENT_SCHEMA.canonicalize(TestCaseFields(title="T"))


def test_requirement_status_defaults_to_draft():
    state = RequirementFields(type=RequirementType.CRS, title="T")
    assert REQUIREMENT_SCHEMA.canonicalize(state)["Status"] == "Draft"


def test_schema_lookup():
    assert schema_for(EntityKind.REQUIREMENT) is REQUIREMENT_SCHEMA
    assert schema_for("test_case") is TEST_CASE_SCHEMA
    assert schema_for_state(TestCaseFields(title="T")) is TEST_CASE_SCHEMA


def test_schema_for_unknown_state():
    with pytest.raises(EntityMismatchError):
        schema_for_state(_Unversioned(name="x"))


def test_schema_for_unknown_kind():
    with pytest.raises(ValueError):
        schema_for("project")
