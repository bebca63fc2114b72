"""
Tests for the command-line interface.
"""

import httpx
import pytest
from typer.testing import CliRunner

from cli import main as cli_main
from adapters.csv_exporter import read_csv
from adapters.harvest_api import HarvestAPI
from adapters.http_client import build_client
from core.config import AppSettings

runner = CliRunner()


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("HARVEST_USER", "ada@example.com")
    monkeypatch.setenv("HARVEST_PASSWORD", "secret")
    monkeypatch.setenv("HARVEST_ACCOUNT", "acme")


@pytest.fixture
def patched_api(monkeypatch, fake_harvest):
    class _FakeAPI:
        def __init__(self, settings, config=None):
            fake_harvest.config = config

        def __enter__(self):
            return fake_harvest

        def __exit__(self, *exc_info):
            return None

    monkeypatch.setattr(cli_main, "HarvestAPI", _FakeAPI)
    return fake_harvest


def test_backup_writes_requested_file(tmp_path, credentials, patched_api):
    path = tmp_path / "export.csv"

    result = runner.invoke(cli_main.app, ["backup", str(path)])

    assert result.exit_code == 0, result.output
    header, records = read_csv(path)
    assert header[0] == "Date"
    assert len(records) == 3


def test_backup_hands_resolved_config_to_gateway(tmp_path, credentials, patched_api):
    path = tmp_path / "export.csv"

    result = runner.invoke(cli_main.app, ["backup", str(path)])

    assert result.exit_code == 0, result.output
    config = patched_api.config
    assert (config.user, config.password, config.account) == ("ada@example.com", "secret", "acme")
    assert config.output_path == path


def test_backup_defaults_to_data_csv(tmp_path, credentials, patched_api):
    result = runner.invoke(cli_main.app, ["backup"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "data.csv").exists()


def test_backup_uses_output_file_from_environment(tmp_path, monkeypatch, credentials, patched_api):
    monkeypatch.setenv("HARVEST_CSV_OUTPUT_FILE", str(tmp_path / "from-env.csv"))

    result = runner.invoke(cli_main.app, ["backup", "--schema", "minimal", "--no-sort"])

    assert result.exit_code == 0, result.output
    header, _ = read_csv(tmp_path / "from-env.csv")
    assert header == ["Date", "Client", "Project", "Task", "Notes", "Hours", "First name", "Last name"]


def test_backup_without_credentials_fails(tmp_path, patched_api):
    result = runner.invoke(cli_main.app, ["backup", str(tmp_path / "x.csv")])

    assert result.exit_code == 1
    assert "HARVEST_USER" in result.output
    assert patched_api.calls == []


def test_backup_authentication_failure(tmp_path, credentials, patched_api):
    patched_api.status_code = 401
    path = tmp_path / "x.csv"

    result = runner.invoke(cli_main.app, ["backup", str(path)])

    assert result.exit_code == 1
    assert "Unable to login" in result.output
    assert patched_api.calls == ["status"]
    assert not path.exists()


def test_backup_rejects_inverted_range(tmp_path, credentials, patched_api):
    result = runner.invoke(
        cli_main.app,
        ["backup", str(tmp_path / "x.csv"), "--since", "2024-02-01", "--until", "2024-01-01"],
    )

    assert result.exit_code != 0
    assert patched_api.calls == []


def test_doctor_reports_missing_credentials():
    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "MISSING" in result.output


def test_doctor_checks_session(monkeypatch, credentials, fake_harvest):
    from cli import doctor

    class _FakeAPI:
        def __init__(self, settings):
            pass

        def __enter__(self):
            return fake_harvest

        def __exit__(self, *exc_info):
            return None

    monkeypatch.setattr(doctor, "HarvestAPI", _FakeAPI)

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert fake_harvest.calls == ["status"]


def test_backup_malformed_status_body_exits_cleanly(tmp_path, monkeypatch, credentials):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"request_count": "n/a"})

    def api_factory(settings, config=None):
        client = build_client(settings, config=config, transport=httpx.MockTransport(handler))
        return HarvestAPI(settings, client=client)

    monkeypatch.setattr(cli_main, "HarvestAPI", api_factory)
    path = tmp_path / "x.csv"

    result = runner.invoke(cli_main.app, ["backup", str(path)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Error:" in result.output
    assert not path.exists()


def test_doctor_rejects_invalid_settings(monkeypatch):
    monkeypatch.setenv("HARVEST_RANGE_START", "not-a-date")

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Invalid configuration" in result.output


def test_doctor_verbose_flag(monkeypatch, credentials, fake_harvest):
    from cli import doctor

    levels: list[bool] = []
    monkeypatch.setattr(doctor, "configure_logging", lambda *, verbose: levels.append(verbose))
    monkeypatch.setattr(doctor, "HarvestAPI", lambda settings: _ContextOf(fake_harvest))

    result = runner.invoke(cli_main.app, ["doctor", "run", "-v"])

    assert result.exit_code == 0, result.output
    assert levels == [True]


def test_doctor_setup_stores_credentials_verbatim(isolated_env):
    result = runner.invoke(
        cli_main.app,
        ["doctor", "setup"],
        input="acme\nada@example.com\nsecret #1\n",
    )

    assert result.exit_code == 0, result.output
    env_path = isolated_env / ".env"
    settings = AppSettings(_env_file=env_path)
    assert settings.account == "acme"
    assert settings.user == "ada@example.com"
    assert settings.password == "secret #1"
    assert AppSettings().password == "secret #1"


class _ContextOf:
    def __init__(self, gateway):
        self._gateway = gateway

    def __enter__(self):
        return self._gateway

    def __exit__(self, *exc_info):
        return None
