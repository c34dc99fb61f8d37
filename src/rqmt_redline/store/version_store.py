"""Append-only version log operations."""

import logging

from rqmt_redline.db.backend import Database
from rqmt_redline.db.queries import (
    get_latest_version_number,
    get_version,
    get_versions,
    insert_version,
)
from rqmt_redline.models.entity import EntityKind
from rqmt_redline.models.version import VersionedEntitySnapshot

logger = logging.getLogger(__name__)


class VersionStore:
    """Persistence for immutable entity snapshots.

    Snapshots are only ever appended. The (kind, entity, version) uniqueness
    constraint makes a racing append fail with DuplicateVersionError instead
    of overwriting.
    """

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db

    async def append(self, snapshot: VersionedEntitySnapshot) -> None:
        """Durably store a new snapshot."""
        await insert_version(self.db, snapshot)
        logger.info(
            "Recorded %s %d v%d",
            snapshot.entity_kind.value,
            snapshot.entity_id,
            snapshot.version_number,
        )

    async def get_by_version(
        self, kind: EntityKind, entity_id: int, version_number: int
    ) -> VersionedEntitySnapshot | None:
        """Get one snapshot, or None if that version was never recorded."""
        return await get_version(self.db, kind, entity_id, version_number)

    async def get_latest_version_number(self, kind: EntityKind, entity_id: int) -> int:
        """Highest version number for an entity; 0 if it has no versions."""
        return await get_latest_version_number(self.db, kind, entity_id)

    async def get_versions(self, kind: EntityKind, entity_id: int) -> list[VersionedEntitySnapshot]:
        """All versions of an entity, ordered by version number."""
        return await get_versions(self.db, kind, entity_id)
