"""Query helpers for the version log and traceability links."""

import json
import logging
import sqlite3
from datetime import UTC, datetime

from rqmt_redline.db.backend import Database, Row
from rqmt_redline.errors import DuplicateLinkError, DuplicateVersionError
from rqmt_redline.models.entity import EntityKind
from rqmt_redline.models.link import CoverageLink, TraceLink
from rqmt_redline.models.version import VersionedEntitySnapshot

logger = logging.getLogger(__name__)

_VERSION_COLUMNS = "entity_kind, entity_id, version_number, fields, modified_by, modified_at"


def _is_unique_violation(error: sqlite3.IntegrityError) -> bool:
    """True for UNIQUE and PRIMARY KEY conflicts; NOT NULL and CHECK failures are not."""
    return "UNIQUE constraint failed" in str(error)


def row_to_snapshot(row: Row) -> VersionedEntitySnapshot:
    """Convert a database row to a VersionedEntitySnapshot."""
    return VersionedEntitySnapshot(
        entity_kind=EntityKind(row["entity_kind"]),
        entity_id=row["entity_id"],
        version_number=row["version_number"],
        field_values=json.loads(row["fields"]),
        modified_by=row["modified_by"],
        modified_at=datetime.fromisoformat(row["modified_at"]),
    )


def row_to_trace_link(row: Row) -> TraceLink:
    """Convert a database row to a TraceLink."""
    return TraceLink(
        id=row["id"],
        from_requirement_id=row["from_requirement_id"],
        to_requirement_id=row["to_requirement_id"],
        link_type=row["link_type"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


async def insert_version(db: Database, snapshot: VersionedEntitySnapshot) -> None:
    """Append a snapshot to the version log.

    Raises DuplicateVersionError when the (kind, entity, version) key is taken.
    """
    try:
        await db.execute(
            f"INSERT INTO entity_versions ({_VERSION_COLUMNS})"  # noqa: S608
            " VALUES (?, ?, ?, ?, ?, ?)",
            (
                snapshot.entity_kind.value,
                snapshot.entity_id,
                snapshot.version_number,
                json.dumps(snapshot.as_dict()),
                snapshot.modified_by,
                snapshot.modified_at.isoformat(),
            ),
        )
    except sqlite3.IntegrityError as e:
        if not _is_unique_violation(e):
            raise
        raise DuplicateVersionError(
            snapshot.entity_kind.value, snapshot.entity_id, snapshot.version_number
        ) from e
    await db.commit()


async def get_version(
    db: Database, kind: EntityKind, entity_id: int, version_number: int
) -> VersionedEntitySnapshot | None:
    """Get a single snapshot by key."""
    cursor = await db.execute(
        f"SELECT {_VERSION_COLUMNS} FROM entity_versions"  # noqa: S608
        " WHERE entity_kind = ? AND entity_id = ? AND version_number = ?",
        (kind.value, entity_id, version_number),
    )
    row = await cursor.fetchone()
    return row_to_snapshot(row) if row else None


async def get_versions(
    db: Database, kind: EntityKind, entity_id: int
) -> list[VersionedEntitySnapshot]:
    """Get all snapshots of an entity, ordered by version number."""
    cursor = await db.execute(
        f"SELECT {_VERSION_COLUMNS} FROM entity_versions"  # noqa: S608
        " WHERE entity_kind = ? AND entity_id = ? ORDER BY version_number",
        (kind.value, entity_id),
    )
    return [row_to_snapshot(row) for row in await cursor.fetchall()]


async def get_latest_version_number(db: Database, kind: EntityKind, entity_id: int) -> int:
    """Highest recorded version number for an entity, or 0 if none."""
    cursor = await db.execute(
        "SELECT COALESCE(MAX(version_number), 0) FROM entity_versions"
        " WHERE entity_kind = ? AND entity_id = ?",
        (kind.value, entity_id),
    )
    row = await cursor.fetchone()
    if row is None:
        raise RuntimeError("MAX query returned no rows")
    return int(row[0])


async def insert_trace_link(
    db: Database, from_requirement_id: int, to_requirement_id: int, link_type: str
) -> TraceLink:
    """Insert a requirement trace link and return it with its id."""
    now = datetime.now(UTC)
    try:
        await db.execute(
            """INSERT INTO requirement_links
            (from_requirement_id, to_requirement_id, link_type, created_at)
            VALUES (?, ?, ?, ?)""",
            (from_requirement_id, to_requirement_id, link_type, now.isoformat()),
        )
    except sqlite3.IntegrityError as e:
        if not _is_unique_violation(e):
            raise
        raise DuplicateLinkError(
            f"Link {from_requirement_id} -> {to_requirement_id} ({link_type}) already exists"
        ) from e
    await db.commit()

    cursor = await db.execute(
        "SELECT * FROM requirement_links"
        " WHERE from_requirement_id = ? AND to_requirement_id = ? AND link_type = ?",
        (from_requirement_id, to_requirement_id, link_type),
    )
    row = await cursor.fetchone()
    if row is None:
        raise RuntimeError("Inserted trace link not found")
    return row_to_trace_link(row)


async def delete_trace_link(db: Database, link_id: int) -> bool:
    """Delete a trace link by id. Returns True if a row was removed."""
    cursor = await db.execute("DELETE FROM requirement_links WHERE id = ?", (link_id,))
    await db.commit()
    return cursor.rowcount > 0


async def get_trace_links(
    db: Database, requirement_id: int, *, outgoing: bool = True, incoming: bool = True
) -> list[TraceLink]:
    """Trace links touching a requirement, ordered by id."""
    clauses: list[str] = []
    params: list[int] = []
    if outgoing:
        clauses.append("from_requirement_id = ?")
        params.append(requirement_id)
    if incoming:
        clauses.append("to_requirement_id = ?")
        params.append(requirement_id)
    if not clauses:
        return []
    cursor = await db.execute(
        "SELECT * FROM requirement_links WHERE "  # noqa: S608
        + " OR ".join(clauses)
        + " ORDER BY id",
        params,
    )
    return [row_to_trace_link(row) for row in await cursor.fetchall()]


async def insert_coverage_link(
    db: Database, requirement_id: int, test_case_id: int
) -> CoverageLink:
    """Record that a test case covers a requirement."""
    now = datetime.now(UTC)
    try:
        await db.execute(
            """INSERT INTO requirement_test_case_links (requirement_id, test_case_id, created_at)
            VALUES (?, ?, ?)""",
            (requirement_id, test_case_id, now.isoformat()),
        )
    except sqlite3.IntegrityError as e:
        if not _is_unique_violation(e):
            raise
        raise DuplicateLinkError(
            f"Test case {test_case_id} already covers requirement {requirement_id}"
        ) from e
    await db.commit()
    return CoverageLink(requirement_id=requirement_id, test_case_id=test_case_id, created_at=now)


async def delete_coverage_link(db: Database, requirement_id: int, test_case_id: int) -> bool:
    """Delete a coverage link. Returns True if a row was removed."""
    cursor = await db.execute(
        "DELETE FROM requirement_test_case_links WHERE requirement_id = ? AND test_case_id = ?",
        (requirement_id, test_case_id),
    )
    await db.commit()
    return cursor.rowcount > 0


async def get_covering_test_cases(db: Database, requirement_id: int) -> list[int]:
    """Test case ids linked to a requirement, ascending."""
    cursor = await db.execute(
        "SELECT test_case_id FROM requirement_test_case_links"
        " WHERE requirement_id = ? ORDER BY test_case_id",
        (requirement_id,),
    )
    return [row["test_case_id"] for row in await cursor.fetchall()]


async def get_covered_requirements(db: Database, test_case_id: int) -> list[int]:
    """Requirement ids a test case is linked to, ascending."""
    cursor = await db.execute(
        "SELECT requirement_id FROM requirement_test_case_links"
        " WHERE test_case_id = ? ORDER BY requirement_id",
        (test_case_id,),
    )
    return [row["requirement_id"] for row in await cursor.fetchall()]
