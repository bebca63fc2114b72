"""CLI UI components (Rich).

Tables and panels live here so the commands only deal with control flow.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from core.services.backup_pipeline import BackupResult


def print_banner(console: Console) -> None:
    title = Text("Harvest backup", style="bold cyan")
    subtitle = Text("Backing up Harvest entries to CSV", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_progress(console: Console) -> Progress:
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def build_summary_table(result: BackupResult) -> Table:
    """Summary of a finished run."""

    table = Table(title="Backup summary")
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Output file", str(result.output_path))
    table.add_row("Date range", f"{result.date_range.start.isoformat()} .. {result.date_range.end.isoformat()}")
    table.add_row("Projects", str(len(result.lookups.projects)))
    table.add_row("Users", str(len(result.lookups.users)))
    table.add_row("Tasks", str(len(result.lookups.tasks)))
    table.add_row("Entries written", str(result.row_count))
    return table
