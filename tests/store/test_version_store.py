"""Tests for version store."""

import asyncio
import sqlite3
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from rqmt_redline.errors import DuplicateVersionError
from rqmt_redline.models.entity import EntityKind
from rqmt_redline.models.version import VersionedEntitySnapshot


def _snapshot(
    version: int, entity_id: int = 1, kind: EntityKind = EntityKind.REQUIREMENT, **fields
) -> VersionedEntitySnapshot:
    return VersionedEntitySnapshot(
        entity_kind=kind,
        entity_id=entity_id,
        version_number=version,
        field_values=fields,
        modified_by=7,
        modified_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
    )


@pytest.mark.asyncio
async def test_append_and_get_by_version(version_store):
    await version_store.append(_snapshot(1, Title="Login", Description=None))

    loaded = await version_store.get_by_version(EntityKind.REQUIREMENT, 1, 1)
    assert loaded is not None
    assert loaded.version_number == 1
    assert loaded.as_dict() == {"Title": "Login", "Description": None}
    assert loaded.modified_by == 7
    assert loaded.modified_at == datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_get_by_version_missing(version_store):
    assert await version_store.get_by_version(EntityKind.REQUIREMENT, 1, 1) is None


@pytest.mark.asyncio
async def test_latest_version_number_defaults_to_zero(version_store):
    assert await version_store.get_latest_version_number(EntityKind.REQUIREMENT, 99) == 0


@pytest.mark.asyncio
async def test_latest_version_number(version_store):
    for n in (1, 2, 3):
        await version_store.append(_snapshot(n, Title=f"v{n}"))
    assert await version_store.get_latest_version_number(EntityKind.REQUIREMENT, 1) == 3


@pytest.mark.asyncio
async def test_duplicate_version_rejected(version_store):
    await version_store.append(_snapshot(1, Title="first"))

    with pytest.raises(DuplicateVersionError) as exc_info:
        await version_store.append(_snapshot(1, Title="racing writer"))
    assert exc_info.value.version_number == 1

    # The original snapshot survives untouched
    loaded = await version_store.get_by_version(EntityKind.REQUIREMENT, 1, 1)
    assert loaded.get("Title") == "first"


@pytest.mark.asyncio
async def test_store_usable_after_duplicate(version_store):
    await version_store.append(_snapshot(1, Title="first"))
    with pytest.raises(DuplicateVersionError):
        await version_store.append(_snapshot(1, Title="dup"))

    await version_store.append(_snapshot(2, Title="second"))
    assert await version_store.get_latest_version_number(EntityKind.REQUIREMENT, 1) == 2


@pytest.mark.asyncio
async def test_kinds_have_separate_logs(version_store):
    await version_store.append(_snapshot(1, kind=EntityKind.REQUIREMENT, Title="req"))
    await version_store.append(_snapshot(1, kind=EntityKind.TEST_CASE, Title="tc"))

    req = await version_store.get_by_version(EntityKind.REQUIREMENT, 1, 1)
    tc = await version_store.get_by_version(EntityKind.TEST_CASE, 1, 1)
    assert req.get("Title") == "req"
    assert tc.get("Title") == "tc"
    assert await version_store.get_latest_version_number(EntityKind.TEST_CASE, 1) == 1


@pytest.mark.asyncio
async def test_get_versions_ordered(version_store):
    await version_store.append(_snapshot(2, Title="B"))
    await version_store.append(_snapshot(1, Title="A"))
    await version_store.append(_snapshot(1, entity_id=2, Title="other"))

    versions = await version_store.get_versions(EntityKind.REQUIREMENT, 1)
    assert [v.version_number for v in versions] == [1, 2]
    assert [v.get("Title") for v in versions] == ["A", "B"]


@pytest.mark.asyncio
async def test_get_versions_nonexistent(version_store):
    assert await version_store.get_versions(EntityKind.TEST_CASE, 12345) == []


@pytest.mark.asyncio
async def test_duplicate_does_not_discard_concurrent_append(version_store):
    await version_store.append(_snapshot(1, Title="first"))

    results = await asyncio.gather(
        version_store.append(_snapshot(1, Title="racing writer")),
        version_store.append(_snapshot(1, entity_id=2, Title="other entity")),
        return_exceptions=True,
    )

    assert isinstance(results[0], DuplicateVersionError)
    assert results[1] is None
    other = await version_store.get_by_version(EntityKind.REQUIREMENT, 2, 1)
    assert other is not None
    assert other.get("Title") == "other entity"


@pytest.mark.asyncio
async def test_non_unique_integrity_error_is_not_a_duplicate(version_store):
    """CHECK and NOT NULL failures propagate as the driver's own error."""
    invalid = VersionedEntitySnapshot.model_construct(
        entity_kind=EntityKind.REQUIREMENT,
        entity_id=1,
        version_number=0,
        field_values=(("Title", "x"),),
        modified_by=1,
        modified_at=datetime(2026, 3, 1, tzinfo=UTC),
    )

    with pytest.raises(sqlite3.IntegrityError) as exc_info:
        await version_store.append(invalid)
    assert not isinstance(exc_info.value, DuplicateVersionError)
    assert await version_store.get_latest_version_number(EntityKind.REQUIREMENT, 1) == 0


def test_snapshot_fields_cannot_be_mutated():
    snapshot = _snapshot(1, Title="Login", Description=None)

    with pytest.raises(TypeError):
        snapshot.field_values[0] = ("Title", "changed")  # type: ignore[index]
    with pytest.raises(ValidationError):
        snapshot.field_values = (("Title", "changed"),)  # type: ignore[misc]

    copy = snapshot.as_dict()
    copy["Title"] = "changed"
    assert snapshot.get("Title") == "Login"
    assert snapshot.as_dict() == {"Title": "Login", "Description": None}
