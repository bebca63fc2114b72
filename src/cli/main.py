"""Command-line entry point.

`harvest-backup backup [FILE]` runs one export; `harvest-backup doctor ...`
holds the diagnostics commands.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import TaskID

from adapters.harvest_api import HarvestAPI
from cli import doctor
from cli.ui_components import build_progress, build_summary_table, print_banner
from core.config import AppSettings, BackupConfig
from core.domain.schema import ExportSchema
from core.errors import HarvestBackupError
from core.log import configure_logging
from core.services.backup_pipeline import BackupRequest, PipelineHooks, run_backup

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Back up Harvest time entries to a CSV file.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _build_hooks(console: Console) -> PipelineHooks:
    progress = build_progress(console)
    tasks: list[TaskID] = []

    def start(description: str, total: int) -> None:
        progress.start()
        tasks.append(progress.add_task(description, total=total))

    def advance() -> None:
        progress.advance(tasks[-1])

    return PipelineHooks(
        note=lambda message: console.print(f"[cyan]![/cyan] {message}"),
        progress_start=start,
        progress_advance=advance,
        progress_finish=progress.stop,
    )


@app.command()
def backup(
    file: Optional[Path] = typer.Argument(
        None,
        help="Output file to write to (default: $HARVEST_CSV_OUTPUT_FILE or data.csv).",
    ),
    schema: ExportSchema = typer.Option(
        ExportSchema.FULL,
        "--schema",
        case_sensitive=False,
        help="Column layout of the CSV.",
    ),
    sort: bool = typer.Option(True, "--sort/--no-sort", help="Sort rows by Harvest entry id."),
    since: Optional[datetime] = typer.Option(
        None,
        "--since",
        formats=["%Y-%m-%d"],
        help="First day to export (default: $HARVEST_RANGE_START or 2010-01-01).",
    ),
    until: Optional[datetime] = typer.Option(
        None,
        "--until",
        formats=["%Y-%m-%d"],
        help="Last day to export (default: today).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every API request."),
) -> None:
    """Backup time entries from Harvest to a CSV."""

    configure_logging(verbose=verbose)

    if since and until and since > until:
        raise typer.BadParameter("--since must not be after --until")

    try:
        settings = AppSettings()
        config = BackupConfig.from_settings(settings, output_path=file)
    except ValidationError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    except HarvestBackupError as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    print_banner(_console)

    request = BackupRequest(
        output_path=config.output_path,
        schema=schema,
        sort=sort,
        since=since.date() if since else None,
        until=until.date() if until else None,
    )
    hooks = _build_hooks(_console)

    try:
        with HarvestAPI(settings, config=config) as gateway:
            result = run_backup(settings=settings, gateway=gateway, request=request, hooks=hooks)
    except HarvestBackupError as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _console.print(build_summary_table(result))
    _console.print(f"[green]Wrote {result.row_count} entries to {result.output_path}[/green]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
