"""Time-entry retrieval, one request per project."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable

from core.config import DEFAULT_RANGE_START
from core.domain.models import DateRange, TimeEntry
from core.errors import ConfigurationError
from core.interfaces.harvest import HarvestGateway

logger = logging.getLogger(__name__)


def default_date_range(start: date = DEFAULT_RANGE_START, end: date | None = None) -> DateRange:
    """`[start, today]`, with today evaluated at call time."""

    end = end or date.today()
    if start > end:
        raise ConfigurationError(f"Date range start {start} is after its end {end}")
    return DateRange(start=start, end=end)


def fetch_entries(
    gateway: HarvestGateway,
    project_ids: Iterable[int],
    date_range: DateRange,
    *,
    on_project: Callable[[int, int], None] | None = None,
) -> list[TimeEntry]:
    """Collect every entry of every project, in project order then API order.

    Nothing is skipped or de-duplicated. `on_project(project_id, count)` is
    called once per project after its entries are collected.
    """

    entries: list[TimeEntry] = []
    for project_id in project_ids:
        project_entries = gateway.get_project_entries(project_id, date_range)
        entries.extend(project_entries)
        logger.debug("Project %s: %d entries", project_id, len(project_entries))
        if on_project is not None:
            on_project(project_id, len(project_entries))
    return entries
