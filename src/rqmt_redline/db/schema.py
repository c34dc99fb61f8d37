"""DDL for the version log and traceability links."""

from rqmt_redline.db.backend import Database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS entity_versions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    entity_kind TEXT NOT NULL,
    entity_id INTEGER NOT NULL,
    version_number INTEGER NOT NULL CHECK (version_number >= 1),
    fields TEXT NOT NULL DEFAULT '{}',
    modified_by INTEGER NOT NULL,
    modified_at TEXT NOT NULL,
    UNIQUE(entity_kind, entity_id, version_number)
);

CREATE INDEX IF NOT EXISTS idx_versions_entity ON entity_versions(entity_kind, entity_id);

-- The version log is append-only
CREATE TRIGGER IF NOT EXISTS entity_versions_no_update BEFORE UPDATE ON entity_versions
BEGIN
    SELECT RAISE(ABORT, 'entity_versions is append-only');
END;

CREATE TRIGGER IF NOT EXISTS entity_versions_no_delete BEFORE DELETE ON entity_versions
BEGIN
    SELECT RAISE(ABORT, 'entity_versions is append-only');
END;

CREATE TABLE IF NOT EXISTS requirement_links (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_requirement_id INTEGER NOT NULL,
    to_requirement_id INTEGER NOT NULL,
    link_type TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE(from_requirement_id, to_requirement_id, link_type),
    CHECK (from_requirement_id <> to_requirement_id)
);
CREATE INDEX IF NOT EXISTS idx_links_from ON requirement_links(from_requirement_id);
CREATE INDEX IF NOT EXISTS idx_links_to ON requirement_links(to_requirement_id);

CREATE TABLE IF NOT EXISTS requirement_test_case_links (
    requirement_id INTEGER NOT NULL,
    test_case_id INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (requirement_id, test_case_id)
);
CREATE INDEX IF NOT EXISTS idx_coverage_test_case ON requirement_test_case_links(test_case_id);
"""


async def apply_schema(db: Database) -> None:
    """Apply the database schema."""
    await db.executescript(SCHEMA_SQL)

    cursor = await db.execute("SELECT version FROM schema_version")
    row = await cursor.fetchone()
    if row is None:
        await db.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))

    await db.commit()
