"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core import config
from core.config import AppSettings
from core.domain.models import (
    Client,
    DateRange,
    LookupTables,
    Project,
    Task,
    ThrottleStatus,
    TimeEntry,
    User,
)


@dataclass
class FakeHarvest:
    """In-memory gateway that records every call made against it."""

    clients: list[Client] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    entries: dict[int, list[TimeEntry]] = field(default_factory=dict)
    status_code: int = 200
    calls: list[str] = field(default_factory=list)
    ranges: list[DateRange] = field(default_factory=list)

    def get_throttle_status(self) -> ThrottleStatus:
        self.calls.append("status")
        return ThrottleStatus(code=self.status_code)

    def list_clients(self) -> list[Client]:
        self.calls.append("clients")
        return list(self.clients)

    def list_projects(self) -> list[Project]:
        self.calls.append("projects")
        return list(self.projects)

    def list_users(self) -> list[User]:
        self.calls.append("users")
        return list(self.users)

    def list_tasks(self) -> list[Task]:
        self.calls.append("tasks")
        return list(self.tasks)

    def get_project_entries(self, project_id: int, date_range: DateRange) -> list[TimeEntry]:
        self.calls.append(f"entries:{project_id}")
        self.ranges.append(date_range)
        return list(self.entries.get(project_id, []))


def make_entry(entry_id: int, project_id: int, *, user_id: int = 100, task_id: int = 50, hours: str = "1.0") -> TimeEntry:
    return TimeEntry(
        id=entry_id,
        project_id=project_id,
        task_id=task_id,
        user_id=user_id,
        spent_at=date(2023, 5, entry_id % 28 + 1),
        hours=Decimal(hours),
        notes=f"Work item {entry_id}",
        created_at=datetime(2023, 5, 1, 9, 0, tzinfo=timezone.utc),
        updated_at=datetime(2023, 5, 2, 17, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def fake_harvest() -> FakeHarvest:
    """2 projects, 1 client, 2 users, 1 task and 3 entries spanning both projects."""

    return FakeHarvest(
        clients=[Client(id=1, name="Acme Corp")],
        projects=[
            Project(id=10, name="Website", hourly_rate=Decimal("95.00"), client_id=1),
            Project(id=20, name="Mobile App", hourly_rate=None, client_id=1),
        ],
        users=[
            User(id=100, first_name="Ada", last_name="Lovelace"),
            User(id=200, first_name="Grace", last_name="Hopper"),
        ],
        tasks=[Task(id=50, name="Development")],
        entries={
            10: [make_entry(3, 10, hours="1.1"), make_entry(1, 10, user_id=200, hours="2.0")],
            20: [make_entry(2, 20, hours="0.26")],
        },
    )


@pytest.fixture
def lookups() -> LookupTables:
    return LookupTables(
        projects={
            10: Project(id=10, name="Website", hourly_rate=Decimal("95.00"), client_id=1),
            20: Project(id=20, name="Mobile App", hourly_rate=None, client_id=1),
        },
        project_clients={10: "Acme Corp", 20: "Acme Corp"},
        users={
            100: User(id=100, first_name="Ada", last_name="Lovelace"),
            200: User(id=200, first_name="Grace", last_name="Hopper"),
        },
        tasks={50: "Development"},
    )


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real HARVEST_* variables and .env files out of the tests.

    Returns the per-user config directory the code sees during the test.
    """

    for name in list(os.environ):
        if name.upper().startswith("HARVEST_"):
            monkeypatch.delenv(name, raising=False)

    user_dir = tmp_path / "user-config"
    monkeypatch.setattr(config, "get_user_config_dir", lambda: user_dir)
    monkeypatch.setitem(AppSettings.model_config, "env_file", (".env", str(user_dir / ".env")))

    monkeypatch.chdir(tmp_path)
    return user_dir
