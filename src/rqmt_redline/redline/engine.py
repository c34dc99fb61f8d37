"""Field-level comparison of two entity snapshots."""

import logging

from rqmt_redline.errors import InvalidComparisonError
from rqmt_redline.models.redline import ChangeType, FieldChange, RedlineResult
from rqmt_redline.models.version import VersionedEntitySnapshot
from rqmt_redline.redline.schema import schema_for

logger = logging.getLogger(__name__)


def _is_empty(value: str | None) -> bool:
    return value is None or value == ""


def classify_change(
    field: str, old_value: str | None, new_value: str | None
) -> FieldChange | None:
    """Classify one field's difference, or return None if it is unchanged.

    Empty (None or "") on both sides counts as equal. Empty values are
    reported as None.
    """
    old_empty = _is_empty(old_value)
    new_empty = _is_empty(new_value)
    if old_empty and new_empty:
        return None
    if old_empty:
        return FieldChange(field=field, new_value=new_value, change_type=ChangeType.ADDED)
    if new_empty:
        return FieldChange(field=field, old_value=old_value, change_type=ChangeType.REMOVED)
    if old_value == new_value:
        return None
    return FieldChange(
        field=field, old_value=old_value, new_value=new_value, change_type=ChangeType.MODIFIED
    )


class RedlineEngine:
    """Stateless comparison of two snapshots of the same entity.

    Output lists one FieldChange per differing field, in the entity schema's
    fixed field order, so identical inputs always give identical results.
    """

    def compare(
        self, old: VersionedEntitySnapshot, new: VersionedEntitySnapshot
    ) -> RedlineResult:
        """Compare ``old`` against ``new``; changeType is relative to old→new."""
        if old.entity_kind != new.entity_kind or old.entity_id != new.entity_id:
            raise InvalidComparisonError(
                f"Cannot compare {old.entity_kind.value} {old.entity_id} "
                f"with {new.entity_kind.value} {new.entity_id}"
            )

        schema = schema_for(old.entity_kind)
        changes: list[FieldChange] = []
        for name in schema.field_names:
            change = classify_change(name, old.get(name), new.get(name))
            if change is not None:
                changes.append(change)

        logger.debug(
            "Compared %s %d v%d..v%d: %d change(s)",
            old.entity_kind.value,
            old.entity_id,
            old.version_number,
            new.version_number,
            len(changes),
        )
        return RedlineResult(
            old_version=old.version_number,
            new_version=new.version_number,
            changes=changes,
        )
