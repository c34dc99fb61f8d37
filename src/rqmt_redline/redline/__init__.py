"""Redline comparison and version recording."""

from rqmt_redline.redline.engine import RedlineEngine
from rqmt_redline.redline.versioning import VersioningService

__all__ = ["RedlineEngine", "VersioningService"]
