"""Harvest REST adapter.

Implements `core.interfaces.harvest.HarvestGateway` over the classic Harvest
API (`https://<account>.harvestapp.com`) with HTTP basic auth and JSON
responses. Only the calls a backup run needs are implemented, and each list
call returns whatever the API sends in one response.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from adapters.http_client import build_client
from core.config import AppSettings, BackupConfig
from core.domain.models import (
    Client,
    DateRange,
    HarvestRecord,
    Project,
    Task,
    ThrottleStatus,
    TimeEntry,
    User,
)
from core.errors import HarvestAPIError
from core.interfaces.harvest import HarvestGateway

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=HarvestRecord)


class HarvestAPI(HarvestGateway):
    """Synchronous Harvest client built on `httpx.Client`."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        config: BackupConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client or build_client(self._settings, config=config)

    def __enter__(self) -> "HarvestAPI":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        logger.debug("GET %s %s", path, params or "")
        try:
            return self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise HarvestAPIError(f"GET {path} failed: {exc}") from exc

    def _get_records(
        self,
        path: str,
        model: type[RecordT],
        *,
        collection_key: str,
        params: dict[str, str] | None = None,
    ) -> list[RecordT]:
        response = self._get(path, params)
        if not response.is_success:
            raise HarvestAPIError(f"GET {path} returned HTTP {response.status_code}")

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise HarvestAPIError(f"GET {path} returned a non-JSON body") from exc

        if isinstance(payload, dict):
            payload = payload.get(collection_key, [])
        if not isinstance(payload, list):
            raise HarvestAPIError(f"GET {path} returned an unexpected payload")

        try:
            records = [model.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise HarvestAPIError(f"GET {path} returned malformed {collection_key}: {exc}") from exc

        logger.debug("GET %s -> %d %s", path, len(records), collection_key)
        return records

    def get_throttle_status(self) -> ThrottleStatus:
        response = self._get("/account/rate_limit_status")
        data: dict[str, Any] = {}
        if response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                data = body
        try:
            return ThrottleStatus.model_validate({**data, "code": response.status_code})
        except ValidationError as exc:
            raise HarvestAPIError(f"Session status check returned a malformed status: {exc}") from exc

    def list_clients(self) -> list[Client]:
        return self._get_records("/clients", Client, collection_key="clients")

    def list_projects(self) -> list[Project]:
        return self._get_records("/projects", Project, collection_key="projects")

    def list_users(self) -> list[User]:
        return self._get_records("/people", User, collection_key="users")

    def list_tasks(self) -> list[Task]:
        return self._get_records("/tasks", Task, collection_key="tasks")

    def get_project_entries(self, project_id: int, date_range: DateRange) -> list[TimeEntry]:
        return self._get_records(
            f"/projects/{project_id}/entries",
            TimeEntry,
            collection_key="day_entries",
            params=date_range.as_query(),
        )
