"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.harvest_api import HarvestAPI
from core.config import DEFAULT_OUTPUT_FILE, AppSettings, get_user_env_file, write_user_env_vars
from core.errors import HarvestBackupError
from core.log import configure_logging

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_session(settings: AppSettings) -> tuple[bool, str]:
    try:
        with HarvestAPI(settings) as api:
            status = api.get_throttle_status()
    except HarvestBackupError as exc:
        return False, escape(str(exc))
    if not status.ok:
        return False, f"HTTP {status.code}"
    detail = f"HTTP {status.code}"
    if status.request_count is not None and status.max_calls is not None:
        detail += f" ({status.request_count}/{status.max_calls} calls used)"
    return True, detail


@app.command()
def run(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every API request."),
) -> None:
    """Show the resolved configuration and check the Harvest session."""

    configure_logging(verbose=verbose)

    try:
        settings = AppSettings()
    except ValidationError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    table = Table(title="Harvest backup doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    missing = settings.missing_credentials()
    for name in ("HARVEST_USER", "HARVEST_PASSWORD", "HARVEST_ACCOUNT"):
        if name in missing:
            table.add_row(name, "MISSING", "Required for backup")
        elif name == "HARVEST_PASSWORD":
            table.add_row(name, "OK", "set")
        else:
            table.add_row(name, "OK", str(getattr(settings, name.removeprefix("HARVEST_").lower())))

    output = settings.csv_output_file
    table.add_row("HARVEST_CSV_OUTPUT_FILE", "OK" if output else "DEFAULT", str(output or DEFAULT_OUTPUT_FILE))
    table.add_row("Range start", "OK", settings.range_start.isoformat())
    table.add_row("User .env", "OK" if get_user_env_file().exists() else "ABSENT", str(get_user_env_file()))

    ok_session = False
    if missing:
        table.add_row("Harvest session", "SKIPPED", "Credentials incomplete")
    else:
        ok_session, detail = _check_session(settings)
        table.add_row("Harvest session", "OK" if ok_session else "FAIL", detail)

    _console.print(table)

    if missing or not ok_session:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive credential setup (stored in the user config .env)."""

    account = typer.prompt("Harvest account (subdomain)").strip()
    user = typer.prompt("Harvest user (e-mail)").strip()
    password = typer.prompt("Harvest password", hide_input=True, confirmation_prompt=False).strip()

    if not account or not user or not password:
        raise typer.BadParameter("account, user and password are required")

    env_path = write_user_env_vars(
        {
            "HARVEST_ACCOUNT": account,
            "HARVEST_USER": user,
            "HARVEST_PASSWORD": password,
        }
    )

    _console.print(f"[green]Saved Harvest credentials to:[/green] {env_path}")
