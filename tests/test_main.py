"""Tests for the command-line entrypoint."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from chatserver.activation import activation_reset_logging
from chatserver.main import main, main_render_client_config
from chatserver.providers import ProviderConsistencyError


@pytest.fixture(autouse=True)
def _reset_command_line_logging():
    yield
    activation_reset_logging()


def _write_config(tmp_path: Path, log_settings: dict[str, object] | None = None, **service_settings: object) -> str:
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps(
            {
                "ServiceSettings": {"ListenAddress": ":8065", **service_settings},
                "TeamSettings": {"SiteName": "Chat"},
                "SqlSettings": {"DriverName": "postgres", "DataSource": "postgresql+psycopg://chat@db/chat"},
                "FileSettings": {"DriverName": "local", "Directory": "uploads"},
                "LogSettings": log_settings or {"EnableConsole": False},
            }
        ),
        encoding="utf-8",
    )
    return str(config_file)


def test_main_check_config_reports_valid_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    config_file = _write_config(tmp_path)
    monkeypatch.setattr(sys, "argv", ["chatserver", "check-config", "--config", config_file])

    main()

    assert capsys.readouterr().out.strip() == f"Config file {config_file} is valid"


def test_main_check_config_exits_non_zero_for_invalid_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Exit with status 1 and print the validation error to stderr."""

    config_file = _write_config(tmp_path, MaximumLoginAttempts=0)
    monkeypatch.setattr(sys, "argv", ["chatserver", "check-config", "--config", config_file])

    with pytest.raises(SystemExit) as exit_info:
        main()

    assert exit_info.value.code == 1
    assert "ServiceSettings.MaximumLoginAttempts" in capsys.readouterr().err


def test_main_render_client_config_skips_activation(tmp_path: Path) -> None:
    """Render projection JSON without touching the storage directory or database."""

    rendered = json.loads(main_render_client_config(_write_config(tmp_path)))

    assert rendered["SiteName"] == "Chat"
    assert rendered["EnableSignUpWithOAuth"] == "false"
    assert not (tmp_path / "uploads").exists()


def test_main_check_config_exits_non_zero_for_missing_log_directory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    log_file = tmp_path / "missing" / "chat.log"
    config_file = _write_config(tmp_path, log_settings={"EnableFile": True, "FileLocation": str(log_file)})
    monkeypatch.setattr(sys, "argv", ["chatserver", "check-config", "--config", config_file])

    with pytest.raises(SystemExit) as exit_info:
        main()

    assert exit_info.value.code == 1
    assert "LogSettings.FileLocation" in capsys.readouterr().err


def test_main_api_exits_non_zero_when_log_file_cannot_be_opened(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Exit with status 1 before serving when the log file location is a directory."""

    log_directory = tmp_path / "logs"
    log_directory.mkdir()
    config_file = _write_config(tmp_path, log_settings={"EnableFile": True, "FileLocation": str(log_directory)})
    monkeypatch.setattr(sys, "argv", ["chatserver", "api", "--config", config_file])

    def _fail_run(*args: object, **kwargs: object) -> None:
        raise AssertionError("server must not start")

    monkeypatch.setattr("uvicorn.run", _fail_run)

    with pytest.raises(SystemExit) as exit_info:
        main()

    assert exit_info.value.code == 1
    assert "Error opening log file" in capsys.readouterr().err


def test_main_check_config_runs_provider_loading(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Fail the check when the provider directory is internally inconsistent."""

    config_file = _write_config(tmp_path)
    monkeypatch.setattr(sys, "argv", ["chatserver", "check-config", "--config", config_file])

    def _inconsistent_load(configuration: object, registry: object) -> object:
        raise ProviderConsistencyError("Internal OAuth provider missing", source="ghost.json")

    monkeypatch.setattr("chatserver.main.provider_load_directory", _inconsistent_load)

    with pytest.raises(SystemExit) as exit_info:
        main()

    assert exit_info.value.code == 1
    assert "Internal OAuth provider missing" in capsys.readouterr().err
