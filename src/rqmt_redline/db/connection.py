"""Database connection management."""

import logging
from pathlib import Path

import aiosqlite

from rqmt_redline.config import get_db_path
from rqmt_redline.db.backend import Database
from rqmt_redline.db.sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)


async def create_connection(db_path: Path | str | None = None) -> Database:
    """Create and initialize a database connection.

    Falls back to RM_DB_PATH when no path is given. For in-memory
    databases, pass ":memory:".
    """
    db_path = str(db_path or get_db_path())

    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row

    # WAL lets history reads proceed while a version is being appended
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA foreign_keys=ON")

    db = SQLiteBackend(conn)
    await db.apply_schema()
    logger.debug("Opened database %s", db_path)
    return db
