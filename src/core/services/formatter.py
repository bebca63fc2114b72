"""Entry formatting: joins a raw entry against the lookup tables.

`format_entry` is pure. The same entry and the same tables always give the
same row, and a missing lookup key raises instead of producing blanks.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal
from typing import Iterable, Mapping, TypeVar

from core.domain.models import ExportRow, LookupTables, TimeEntry
from core.errors import LookupResolutionError

_QUARTERS_PER_HOUR = Decimal(4)

K = TypeVar("K")
V = TypeVar("V")


def rounded_hours(hours: Decimal | float | int | str) -> Decimal:
    """Round up to the next quarter hour: `ceil(hours * 4) / 4`.

    Billing rounds up, never to nearest: 1.1 -> 1.25, 1.26 -> 1.5, 1.0 -> 1.0.
    """

    value = hours if isinstance(hours, Decimal) else Decimal(str(hours))
    quarters = (value * _QUARTERS_PER_HOUR).to_integral_value(rounding=ROUND_CEILING)
    return quarters / _QUARTERS_PER_HOUR


def _lookup(mapping: Mapping[K, V], key: K, kind: str, entry: TimeEntry) -> V:
    try:
        return mapping[key]
    except KeyError:
        raise LookupResolutionError(kind, key, referenced_by=f"time entry {entry.id}") from None


def format_entry(entry: TimeEntry, lookups: LookupTables) -> ExportRow:
    project = _lookup(lookups.projects, entry.project_id, "project", entry)
    client_name = _lookup(lookups.project_clients, entry.project_id, "project client", entry)
    task_name = _lookup(lookups.tasks, entry.task_id, "task", entry)
    user = _lookup(lookups.users, entry.user_id, "user", entry)

    return ExportRow(
        spent_at=entry.spent_at,
        client=client_name,
        project=project.name,
        task=task_name,
        notes=entry.notes,
        hours=entry.hours,
        hours_rounded=rounded_hours(entry.hours),
        first_name=user.first_name,
        last_name=user.last_name,
        created_on=entry.created_at,
        updated_on=entry.updated_at,
        harvest_id=entry.id,
        project_id=entry.project_id,
        user_id=entry.user_id,
        project_hourly_rate=project.hourly_rate,
        task_id=entry.task_id,
        client_id=project.client_id,
    )


def sort_rows(rows: Iterable[ExportRow]) -> list[ExportRow]:
    """Ascending by source entry id."""

    return sorted(rows, key=lambda row: row.harvest_id)


def format_entries(
    entries: Iterable[TimeEntry],
    lookups: LookupTables,
    *,
    sort: bool = True,
) -> list[ExportRow]:
    rows = [format_entry(entry, lookups) for entry in entries]
    return sort_rows(rows) if sort else rows
