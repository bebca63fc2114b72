"""Reference-data loading.

Builds the lookup tables the formatter joins against. Every table is fully
resolved here, before any time entry is fetched: a project whose client is not
in the client list aborts the run.
"""

from __future__ import annotations

import logging

from core.domain.models import LookupTables, Project, User
from core.errors import LookupResolutionError
from core.interfaces.harvest import HarvestGateway

logger = logging.getLogger(__name__)


def load_projects(gateway: HarvestGateway) -> tuple[dict[int, Project], dict[int, str]]:
    """Return `project_id -> Project` and `project_id -> client name`.

    Projects and clients are fetched in the same call so the client names
    resolve against a consistent snapshot.
    """

    projects = gateway.list_projects()
    client_names = {client.id: client.name for client in gateway.list_clients()}

    project_map: dict[int, Project] = {}
    project_clients: dict[int, str] = {}
    for project in projects:
        project_map[project.id] = project
        if project.id in project_clients:
            continue
        try:
            project_clients[project.id] = client_names[project.client_id]
        except KeyError:
            raise LookupResolutionError(
                "client", project.client_id, referenced_by=f"project {project.id}"
            ) from None

    logger.debug("Loaded %d projects across %d clients", len(project_map), len(client_names))
    return project_map, project_clients


def load_users(gateway: HarvestGateway) -> dict[int, User]:
    users = {user.id: user for user in gateway.list_users()}
    logger.debug("Loaded %d users", len(users))
    return users


def load_tasks(gateway: HarvestGateway) -> dict[int, str]:
    tasks = {task.id: task.name for task in gateway.list_tasks()}
    logger.debug("Loaded %d tasks", len(tasks))
    return tasks


def load_lookup_tables(gateway: HarvestGateway) -> LookupTables:
    projects, project_clients = load_projects(gateway)
    users = load_users(gateway)
    tasks = load_tasks(gateway)
    return LookupTables(
        projects=projects,
        project_clients=project_clients,
        users=users,
        tasks=tasks,
    )
