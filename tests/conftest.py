"""Shared test fixtures."""

import pytest_asyncio

from rqmt_redline.db.connection import create_connection
from rqmt_redline.models.entity import EntityKind
from rqmt_redline.redline.versioning import VersioningService
from rqmt_redline.store.link_store import TraceLinkStore
from rqmt_redline.store.version_store import VersionStore


@pytest_asyncio.fixture
async def db():
    """In-memory database with full schema."""
    conn = await create_connection(":memory:")
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def version_store(db):
    """Version store backed by in-memory DB."""
    return VersionStore(db)


@pytest_asyncio.fixture
async def versioning(version_store):
    """Versioning service over the in-memory version store."""
    return VersioningService(version_store)


@pytest_asyncio.fixture
async def links(db):
    """Trace link store backed by in-memory DB."""
    return TraceLinkStore(db)


class RacingVersionStore(VersionStore):
    """Version store that under-reports the latest version number.

    Simulates a concurrent writer that appended between our read of the
    latest number and our append.
    """

    def __init__(self, db, stale_reads: int = 0):
        super().__init__(db)
        self.stale_reads = stale_reads
        self.append_attempts = 0

    async def get_latest_version_number(self, kind: EntityKind, entity_id: int) -> int:
        latest = await super().get_latest_version_number(kind, entity_id)
        if self.stale_reads > 0 and latest > 0:
            self.stale_reads -= 1
            return latest - 1
        return latest

    async def append(self, snapshot) -> None:
        self.append_attempts += 1
        await super().append(snapshot)


@pytest_asyncio.fixture
async def racing_store(db):
    """Version store whose latest-number reads can be made stale per test."""
    return RacingVersionStore(db)
