"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_db_path() -> Path:
    """Return the database file path from RM_DB_PATH."""
    raw = os.environ.get("RM_DB_PATH", "~/.local/share/rqmt_redline/versions.db")
    return Path(raw).expanduser()


def is_manager_mode() -> bool:
    """Return True if RM_MANAGER is set to TRUE."""
    return os.environ.get("RM_MANAGER", "").upper() == "TRUE"


def get_log_level() -> str:
    """Return the logging level from RM_LOG_LEVEL."""
    return os.environ.get("RM_LOG_LEVEL", "WARNING").upper()
