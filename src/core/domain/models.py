"""Domain models (Pydantic v2).

Harvest records arrive either with the hyphenated names of the XML API
(`client-id`, `spent-at`) or with the underscore names of the JSON API, and the
JSON list endpoints wrap each record in a single-key envelope
(`{"project": {...}}`). `HarvestRecord` normalizes both so the rest of the
code only deals with typed attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from core.domain.schema import ExportSchema


def _alias(name: str) -> AliasChoices:
    return AliasChoices(name, name.replace("_", "-"))


class HarvestRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def unwrap_envelope(cls, data: Any) -> Any:
        if isinstance(data, dict) and len(data) == 1:
            (inner,) = data.values()
            if isinstance(inner, dict):
                return inner
        return data


class Client(HarvestRecord):
    id: int
    name: str


class Project(HarvestRecord):
    id: int
    name: str
    hourly_rate: Decimal | None = Field(default=None, validation_alias=_alias("hourly_rate"))
    client_id: int = Field(..., validation_alias=_alias("client_id"))


class User(HarvestRecord):
    id: int
    first_name: str = Field(..., validation_alias=_alias("first_name"))
    last_name: str = Field(..., validation_alias=_alias("last_name"))


class Task(HarvestRecord):
    id: int
    name: str


class TimeEntry(HarvestRecord):
    """A single raw time entry as returned for a project."""

    id: int
    project_id: int = Field(..., validation_alias=_alias("project_id"))
    task_id: int = Field(..., validation_alias=_alias("task_id"))
    user_id: int = Field(..., validation_alias=_alias("user_id"))
    spent_at: date = Field(..., validation_alias=_alias("spent_at"))
    hours: Decimal
    notes: str | None = None
    created_at: datetime | None = Field(default=None, validation_alias=_alias("created_at"))
    updated_at: datetime | None = Field(default=None, validation_alias=_alias("updated_at"))


class ThrottleStatus(HarvestRecord):
    """Result of the session status check (`/account/rate_limit_status`)."""

    code: int
    request_count: int | None = Field(default=None, validation_alias=_alias("request_count"))
    timeframe_limit: int | None = Field(default=None, validation_alias=_alias("timeframe_limit"))
    max_calls: int | None = Field(default=None, validation_alias=_alias("max_calls"))
    lockout_seconds: int | None = Field(default=None, validation_alias=_alias("lockout_seconds"))

    @property
    def ok(self) -> bool:
        return self.code == 200


class DateRange(BaseModel):
    """Inclusive range of `spent_at` dates requested from the API."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError(f"range start {self.start} is after range end {self.end}")
        return self

    def as_query(self) -> dict[str, str]:
        return {"from": self.start.strftime("%Y%m%d"), "to": self.end.strftime("%Y%m%d")}


@dataclass(frozen=True)
class LookupTables:
    """Lookup mappings built once per run and passed into the formatter."""

    projects: Mapping[int, Project] = field(default_factory=dict)
    project_clients: Mapping[int, str] = field(default_factory=dict)
    users: Mapping[int, User] = field(default_factory=dict)
    tasks: Mapping[int, str] = field(default_factory=dict)

    @property
    def project_ids(self) -> list[int]:
        return list(self.projects.keys())


def _render(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class ExportRow(BaseModel):
    """Denormalized time entry, one per CSV line.

    Field aliases are the CSV column names of the full schema.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    spent_at: date = Field(..., alias="Date")
    client: str = Field(..., alias="Client")
    project: str = Field(..., alias="Project")
    task: str = Field(..., alias="Task")
    notes: str | None = Field(default=None, alias="Notes")
    hours: Decimal = Field(..., alias="Hours")
    hours_rounded: Decimal = Field(..., alias="Hours rounded")
    first_name: str = Field(..., alias="First name")
    last_name: str = Field(..., alias="Last name")
    created_on: datetime | None = Field(default=None, alias="Created on")
    updated_on: datetime | None = Field(default=None, alias="Updated on")
    harvest_id: int = Field(..., alias="Harvest ID")
    project_id: int = Field(..., alias="Project ID")
    user_id: int = Field(..., alias="User ID")
    project_hourly_rate: Decimal | None = Field(default=None, alias="Project hourly rate")
    task_id: int = Field(..., alias="Task ID")
    client_id: int = Field(..., alias="Client ID")

    def as_record(self, schema: ExportSchema = ExportSchema.FULL) -> dict[str, str]:
        """Return the row as `column -> text` in the column order of `schema`."""

        values = self.model_dump(by_alias=True)
        return {column: _render(values[column]) for column in schema.columns}
