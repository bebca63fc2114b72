"""Contract for the remote time-tracking API.

The pipeline only depends on this Protocol; `adapters.harvest_api.HarvestAPI`
is the HTTP implementation and tests substitute an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import Client, DateRange, Project, Task, ThrottleStatus, TimeEntry, User


@runtime_checkable
class HarvestGateway(Protocol):
    """Read-only operations consumed by a backup run."""

    def get_throttle_status(self) -> ThrottleStatus:
        """Lightweight call used to verify the session."""

        ...

    def list_clients(self) -> Sequence[Client]:
        ...

    def list_projects(self) -> Sequence[Project]:
        ...

    def list_users(self) -> Sequence[User]:
        ...

    def list_tasks(self) -> Sequence[Task]:
        ...

    def get_project_entries(self, project_id: int, date_range: DateRange) -> Sequence[TimeEntry]:
        """All time entries of one project whose `spent_at` falls in `date_range`."""

        ...
