"""Error types raised by the version log, redline engine and link store."""


class RedlineError(Exception):
    """Base class for version-history errors."""


class InvalidComparisonError(RedlineError, ValueError):
    """Two snapshots of different entities were passed for comparison."""


class EntityMismatchError(RedlineError, ValueError):
    """A snapshot or field state does not belong to the expected entity."""


class VersionNotFoundError(RedlineError, LookupError):
    """No snapshot exists for the requested version number."""

    def __init__(self, entity_kind: str, entity_id: int, version_number: int):
        super().__init__(f"{entity_kind} {entity_id} has no version {version_number}")
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        self.version_number = version_number


class DuplicateVersionError(RedlineError):
    """The (entity, version number) pair is already in the log."""

    def __init__(self, entity_kind: str, entity_id: int, version_number: int):
        super().__init__(f"{entity_kind} {entity_id} already has version {version_number}")
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        self.version_number = version_number


class WriteConflictError(RedlineError):
    """A version could not be recorded after retrying a duplicate-version race."""


class DuplicateLinkError(RedlineError):
    """The trace or coverage link already exists."""
