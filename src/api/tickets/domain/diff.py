"""Change-diff engine for tickets.

Compares a ticket's current tracked values with a partial patch and
produces one ``FieldChange`` per field whose normalized value differs.
Normalized values are the strings written to the history table, so two
values that render identically never produce a change.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Any, Mapping

TRACKED_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "status",
    "priority",
    "assigned_to",
    "due_date",
    "parent_id",
    "ticket_type",
)

DATE_FIELDS = frozenset({"due_date"})
ENUM_FIELDS = frozenset({"status", "priority", "ticket_type"})

# Baseline for creation history: every tracked field absent
EMPTY_TICKET: Mapping[str, Any] = {field: None for field in TRACKED_FIELDS}


@dataclass(frozen=True)
class FieldChange:
    """A single tracked field going from ``old_value`` to ``new_value``."""

    field: str
    old_value: str | None
    new_value: str | None


def format_timestamp(value: datetime) -> str:
    """Render as UTC ISO-8601 with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _to_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def normalize(field: str, value: Any) -> str | None:
    """Normalize a field value for comparison and storage.

    - ``None`` stays ``None`` (the field is empty)
    - date fields become canonical UTC timestamps; unparseable input is
      treated as empty
    - enum fields are upper-cased
    - everything else goes through ``str``
    """
    if value is None:
        return None

    if field in DATE_FIELDS:
        parsed = _to_datetime(value)
        return format_timestamp(parsed) if parsed is not None else None

    if field in ENUM_FIELDS:
        return str(value).upper()

    return str(value)


def diff(
    current: Mapping[str, Any],
    patch: Mapping[str, Any],
    tracked_fields: tuple[str, ...] = TRACKED_FIELDS,
) -> list[FieldChange]:
    """Compute the tracked-field changes a patch would make.

    Only keys present in ``patch`` are considered; an explicit ``None``
    clears the field. Changes are returned in ``tracked_fields`` order,
    whatever the order of ``patch``. Untracked keys are ignored.
    """
    changes: list[FieldChange] = []
    for field in tracked_fields:
        if field not in patch:
            continue
        old = normalize(field, current.get(field))
        new = normalize(field, patch[field])
        if old != new:
            changes.append(FieldChange(field=field, old_value=old, new_value=new))
    return changes


def creation_changes(
    values: Mapping[str, Any],
    tracked_fields: tuple[str, ...] = TRACKED_FIELDS,
) -> list[FieldChange]:
    """Changes describing a new ticket: one per non-empty tracked field."""
    # Empty fields get no CREATE row; null-to-null rows carry no information.
    return diff(EMPTY_TICKET, values, tracked_fields)


DELETION_CHANGE = FieldChange(field="deleted", old_value="false", new_value="true")
