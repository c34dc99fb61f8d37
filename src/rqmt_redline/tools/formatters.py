"""Compact output formatters for MCP tool responses."""

from rqmt_redline.models.link import TraceLink
from rqmt_redline.models.redline import ChangeType, RedlineResult
from rqmt_redline.models.version import VersionedEntitySnapshot
from rqmt_redline.redline.schema import schema_for

_CHANGE_MARKERS = {
    ChangeType.ADDED: "+",
    ChangeType.REMOVED: "-",
    ChangeType.MODIFIED: "~",
}


def format_version_header(snapshot: VersionedEntitySnapshot) -> str:
    """Format: [requirement 12] v3 | user 4 | 2026-01-05 14:03 UTC."""
    when = snapshot.modified_at.strftime("%Y-%m-%d %H:%M UTC")
    return (
        f"[{snapshot.entity_kind.value} {snapshot.entity_id}] v{snapshot.version_number}"
        f" | user {snapshot.modified_by} | {when}"
    )


def format_version_compact(snapshot: VersionedEntitySnapshot) -> str:
    """Header + title. For history listings."""
    title = snapshot.get("Title")
    if title:
        return f"{format_version_header(snapshot)}\n  {title}"
    return format_version_header(snapshot)


def format_version_full(snapshot: VersionedEntitySnapshot) -> str:
    """Header + every schema field, empty fields shown as (none)."""
    lines = [format_version_header(snapshot)]
    for name in schema_for(snapshot.entity_kind).field_names:
        value = snapshot.get(name)
        lines.append(f"  {name}: {value if value else '(none)'}")
    return "\n".join(lines)


def format_redline(result: RedlineResult) -> str:
    """Human-readable redline, one line per changed field."""
    header = f"Redline v{result.old_version} -> v{result.new_version}"
    if not result.changes:
        return f"{header}\nNo changes."

    lines = [header, f"{len(result.changes)} change(s)"]
    for change in result.changes:
        marker = _CHANGE_MARKERS[change.change_type]
        if change.change_type == ChangeType.ADDED:
            lines.append(f"  {marker} {change.field}: {change.new_value}")
        elif change.change_type == ChangeType.REMOVED:
            lines.append(f"  {marker} {change.field}: {change.old_value}")
        else:
            lines.append(f"  {marker} {change.field}: {change.old_value} -> {change.new_value}")
    return "\n".join(lines)


def format_trace_link(link: TraceLink) -> str:
    """Format: #5 CRS-PRS | 12 -> 40."""
    return (
        f"#{link.id} {link.link_type} | {link.from_requirement_id} -> {link.to_requirement_id}"
    )


def format_result_list(
    formatted_items: list[str],
    header: str | None = None,
    note: str | None = None,
) -> str:
    """Count + note + items joined by blank lines."""
    if not formatted_items:
        return "No results found."

    lines: list[str] = []
    if header:
        lines.append(header)
    lines.append(f"{len(formatted_items)} result(s)")
    if note:
        lines.append(f"Note: {note}")
    lines.append("")
    lines.append("\n\n".join(formatted_items))
    return "\n".join(lines)
