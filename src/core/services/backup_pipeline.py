"""Backup orchestration.

Runs the stages strictly in order:
authenticate -> load reference data -> fetch entries -> format -> sort -> write.

UI concerns (notes, progress bars) stay in the CLI and reach the pipeline only
through `PipelineHooks`. Any stage failure raises and ends the run; the output
file is only opened after every earlier stage has succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable

from adapters.csv_exporter import write_csv
from core.config import AppSettings
from core.domain.models import DateRange, ExportRow, LookupTables
from core.domain.schema import ExportSchema
from core.interfaces.harvest import HarvestGateway
from core.services.entry_fetcher import default_date_range, fetch_entries
from core.services.formatter import format_entries
from core.services.reference_data import load_lookup_tables
from core.services.session import authenticate

logger = logging.getLogger(__name__)


@dataclass
class BackupRequest:
    """Parameters that control one backup run."""

    output_path: Path
    schema: ExportSchema = ExportSchema.FULL
    sort: bool = True
    since: date | None = None
    until: date | None = None


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    note: Callable[[str], None] | None = None
    progress_start: Callable[[str, int], None] | None = None
    progress_advance: Callable[[], None] | None = None
    progress_finish: Callable[[], None] | None = None


@dataclass
class BackupResult:
    output_path: Path
    date_range: DateRange
    lookups: LookupTables
    rows: list[ExportRow] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def _note(hooks: PipelineHooks, message: str) -> None:
    logger.debug(message)
    if hooks.note:
        hooks.note(message)


def run_backup(
    *,
    settings: AppSettings,
    gateway: HarvestGateway,
    request: BackupRequest,
    hooks: PipelineHooks | None = None,
) -> BackupResult:
    hooks = hooks or PipelineHooks()

    date_range = default_date_range(
        start=request.since or settings.range_start,
        end=request.until,
    )

    authenticate(gateway)

    _note(hooks, "Populating project, user and task maps.")
    lookups = load_lookup_tables(gateway)

    project_ids = lookups.project_ids
    _note(hooks, f"Retrieving data for {len(project_ids)} projects")
    if hooks.progress_start:
        hooks.progress_start("Projects", len(project_ids))

    def _advance(_project_id: int, _count: int) -> None:
        if hooks.progress_advance:
            hooks.progress_advance()

    try:
        entries = fetch_entries(gateway, project_ids, date_range, on_project=_advance)
    finally:
        if hooks.progress_finish:
            hooks.progress_finish()

    _note(hooks, f"Formatting {len(entries)} time entries")
    rows = format_entries(entries, lookups, sort=request.sort)

    write_csv(rows=rows, output_path=request.output_path, schema=request.schema)
    logger.info("Wrote %d entries to %s", len(rows), request.output_path)

    return BackupResult(
        output_path=request.output_path,
        date_range=date_range,
        lookups=lookups,
        rows=rows,
    )
