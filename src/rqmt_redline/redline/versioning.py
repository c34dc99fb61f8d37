"""Version recording and redline queries over the version log."""

import logging
from datetime import UTC, datetime

from pydantic import BaseModel

from rqmt_redline.errors import (
    DuplicateVersionError,
    EntityMismatchError,
    VersionNotFoundError,
    WriteConflictError,
)
from rqmt_redline.models.entity import EntityKind
from rqmt_redline.models.redline import RedlineResult
from rqmt_redline.models.version import VersionedEntitySnapshot
from rqmt_redline.redline.engine import RedlineEngine
from rqmt_redline.redline.schema import schema_for_state
from rqmt_redline.store.version_store import VersionStore

logger = logging.getLogger(__name__)


class VersioningService:
    """Records a snapshot per save and answers "what changed between A and B"."""

    def __init__(self, store: VersionStore, engine: RedlineEngine | None = None):
        """Initialize with a version store and an optional redline engine."""
        self.store = store
        self.engine = engine or RedlineEngine()

    async def record_version(
        self, entity_id: int, state: BaseModel, modified_by: int
    ) -> VersionedEntitySnapshot:
        """Append the full post-edit state as the entity's next version.

        The next number is the latest recorded number plus one (1 for a new
        entity). No-op edits still produce a version. A concurrent writer
        that claimed the same number surfaces as DuplicateVersionError.
        """
        schema = schema_for_state(state)
        latest = await self.store.get_latest_version_number(schema.kind, entity_id)
        snapshot = VersionedEntitySnapshot(
            entity_kind=schema.kind,
            entity_id=entity_id,
            version_number=latest + 1,
            field_values=schema.canonicalize(state),
            modified_by=modified_by,
            modified_at=datetime.now(UTC),
        )
        await self.store.append(snapshot)
        return snapshot

    async def record_version_with_retry(
        self, entity_id: int, state: BaseModel, modified_by: int
    ) -> VersionedEntitySnapshot:
        """record_version, retried once with a fresh number on a duplicate-version race."""
        try:
            return await self.record_version(entity_id, state, modified_by)
        except DuplicateVersionError as e:
            logger.warning("%s; retrying with a fresh version number", e)

        try:
            return await self.record_version(entity_id, state, modified_by)
        except DuplicateVersionError as e:
            raise WriteConflictError(f"Could not record a new version: {e}") from e

    async def get_version(
        self, kind: EntityKind, entity_id: int, version_number: int
    ) -> VersionedEntitySnapshot:
        """Load one version or raise VersionNotFoundError."""
        kind = EntityKind(kind)
        snapshot = await self.store.get_by_version(kind, entity_id, version_number)
        if snapshot is None:
            raise VersionNotFoundError(kind.value, entity_id, version_number)
        if snapshot.entity_kind != kind or snapshot.entity_id != entity_id:
            raise EntityMismatchError(
                f"Version store returned {snapshot.entity_kind.value} {snapshot.entity_id} "
                f"for {kind.value} {entity_id}"
            )
        return snapshot

    async def get_history(
        self, kind: EntityKind, entity_id: int
    ) -> list[VersionedEntitySnapshot]:
        """All versions of an entity, oldest first."""
        return await self.store.get_versions(EntityKind(kind), entity_id)

    async def get_redline(
        self,
        kind: EntityKind,
        entity_id: int,
        old_version_number: int,
        new_version_number: int,
    ) -> RedlineResult:
        """Diff two versions of one entity.

        The comparison always runs in chronological order, so Added and
        Removed describe the edit history whichever way round the numbers
        are passed. The result carries the numbers as supplied.
        """
        old = await self.get_version(kind, entity_id, old_version_number)
        new = await self.get_version(kind, entity_id, new_version_number)

        if old.version_number <= new.version_number:
            result = self.engine.compare(old, new)
        else:
            result = self.engine.compare(new, old)

        return result.model_copy(
            update={"old_version": old_version_number, "new_version": new_version_number}
        )
