"""CSV export schemas.

The column set is explicit configuration: the CLI and the pipeline pick one of
these variants and the writer follows its column order.
"""

from __future__ import annotations

from enum import Enum


FULL_COLUMNS: tuple[str, ...] = (
    "Date",
    "Client",
    "Project",
    "Task",
    "Notes",
    "Hours",
    "Hours rounded",
    "First name",
    "Last name",
    "Created on",
    "Updated on",
    "Harvest ID",
    "Project ID",
    "User ID",
    "Project hourly rate",
    "Task ID",
    "Client ID",
)

MINIMAL_COLUMNS: tuple[str, ...] = (
    "Date",
    "Client",
    "Project",
    "Task",
    "Notes",
    "Hours",
    "First name",
    "Last name",
)


class ExportSchema(str, Enum):
    """Supported column layouts for the exported CSV."""

    FULL = "full"
    MINIMAL = "minimal"

    @classmethod
    def default(cls) -> "ExportSchema":
        return cls.FULL

    @property
    def columns(self) -> tuple[str, ...]:
        return MINIMAL_COLUMNS if self is ExportSchema.MINIMAL else FULL_COLUMNS
