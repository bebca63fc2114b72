"""Core configuration.

Responsibility:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Gives the HTTP adapter and the pipeline one consistent view of the config.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path

import typer
from dotenv import set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError


APP_NAME = "harvest-backup"
DEFAULT_OUTPUT_FILE = Path("data.csv")
DEFAULT_RANGE_START = date(2010, 1, 1)


def get_user_config_dir() -> Path:
    return Path(typer.get_app_dir(APP_NAME))


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Set variables in the per-user .env file, keeping any other lines.

    Values are single-quoted so `#`, spaces and quotes survive the round trip
    through python-dotenv. The file holds a password and is made owner-only.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    if not env_path.exists():
        env_path.write_text(f"# {APP_NAME} user config (.env)\n", encoding="utf-8")
    env_path.chmod(0o600)

    for key, value in values.items():
        if value is None:
            continue
        set_key(str(env_path), key, value, quote_mode="always")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Every field maps to a `HARVEST_*` environment variable; `.env` files in the
    working directory and in the user config directory are read as well.
    """

    model_config = SettingsConfigDict(
        env_prefix="HARVEST_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    user: str | None = Field(
        default=None,
        description="Harvest login (e-mail address).",
    )
    password: str | None = Field(
        default=None,
        description="Harvest password.",
    )
    account: str | None = Field(
        default=None,
        description="Harvest account subdomain (<account>.harvestapp.com).",
    )
    csv_output_file: Path | None = Field(
        default=None,
        description="Default CSV output path when none is given on the command line.",
    )

    range_start: date = Field(
        default=DEFAULT_RANGE_START,
        description="Lower bound of the exported date range (inclusive).",
    )

    base_url: str | None = Field(
        default=None,
        description="Override for the API base URL (defaults to https://<account>.harvestapp.com).",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="harvest-backup/0.1",
        min_length=1,
        description="User-Agent sent with every API request.",
    )

    def api_base_url(self, account: str | None = None) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        account = account or self.account
        if not account:
            raise ConfigurationError("HARVEST_ACCOUNT is not set")
        return f"https://{account}.harvestapp.com"

    def missing_credentials(self) -> list[str]:
        missing: list[str] = []
        for name in ("user", "password", "account"):
            if not getattr(self, name):
                missing.append(f"HARVEST_{name.upper()}")
        return missing

    def require_credentials(self) -> None:
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")


@dataclass(frozen=True)
class BackupConfig:
    """Resolved options for one backup run, assembled once by the CLI."""

    user: str
    password: str
    account: str
    output_path: Path

    @classmethod
    def from_settings(cls, settings: AppSettings, output_path: Path | None = None) -> "BackupConfig":
        settings.require_credentials()
        path = output_path or settings.csv_output_file or DEFAULT_OUTPUT_FILE
        return cls(
            user=settings.user or "",
            password=settings.password or "",
            account=settings.account or "",
            output_path=Path(path),
        )
