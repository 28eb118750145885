"""Unit tests for the CLI entrypoint (orchestrator mocked)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, Mock

import pytest

from bitwarden_orchestrator import cli
from bitwarden_orchestrator.bitwarden.models import VaultItem
from bitwarden_orchestrator.core.config import OrchestratorConfig
from bitwarden_orchestrator.errors import (
    AuthenticationFailed,
    ItemListingFailed,
    LoginFailed,
    ToolNotInstalled,
)


@pytest.fixture
def fake_orchestrator(monkeypatch: pytest.MonkeyPatch) -> Mock:
    orchestrator = Mock()
    orchestrator.init = AsyncMock(return_value=None)
    orchestrator.list_items = AsyncMock(return_value=[])
    orchestrator.current_session.return_value = "abc123"
    factory = Mock(return_value=orchestrator)
    monkeypatch.setattr(cli, "Orchestrator", factory)
    orchestrator.factory = factory
    return orchestrator


def test_unlock_prints_session(fake_orchestrator: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli.main(["unlock", "--print-session"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "abc123"
    fake_orchestrator.init.assert_awaited_once()


def test_unlock_does_not_print_session_by_default(
    fake_orchestrator: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["unlock"]) == 0
    assert "abc123" not in capsys.readouterr().out


def test_list_items_prints_json(fake_orchestrator: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    fake_orchestrator.list_items.return_value = [
        VaultItem.model_validate({"id": "a", "name": "First", "folderId": None})
    ]

    exit_code = cli.main(["list-items", "--compact"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert json.loads(out) == [{"id": "a", "name": "First", "folderId": None}]


def test_flags_override_configuration(fake_orchestrator: Mock) -> None:
    cli.main(
        [
            "--url",
            "https://arg.example.com",
            "--skip-server-config",
            "--timeout-seconds",
            "0",
            "unlock",
        ]
    )

    config = fake_orchestrator.factory.call_args.args[0]
    assert isinstance(config, OrchestratorConfig)
    assert config.credentials.url == "https://arg.example.com"
    assert config.cli.configure_server is False
    assert config.cli.timeout_seconds == 0


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ToolNotInstalled("missing"), cli.EXIT_TOOL_NOT_INSTALLED),
        (LoginFailed("nope"), cli.EXIT_LOGIN_FAILED),
        (AuthenticationFailed("bad password"), cli.EXIT_AUTHENTICATION_FAILED),
    ],
)
def test_errors_map_to_exit_codes(
    fake_orchestrator: Mock,
    capsys: pytest.CaptureFixture[str],
    error: Exception,
    expected: int,
) -> None:
    fake_orchestrator.init.side_effect = error

    assert cli.main(["unlock"]) == expected
    assert capsys.readouterr().err.count(str(error)) == 1


def test_listing_failure_exit_code(fake_orchestrator: Mock) -> None:
    fake_orchestrator.list_items.side_effect = ItemListingFailed("Vault is locked.")

    assert cli.main(["list-items"]) == cli.EXIT_LISTING_FAILED


def test_invalid_configuration_exit_code(
    fake_orchestrator: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["--timeout-seconds", "-5", "unlock"]) == cli.EXIT_CONFIGURATION
    assert "Configuration error" in capsys.readouterr().err
    fake_orchestrator.factory.assert_not_called()


def test_unknown_log_level_flag_exit_code(
    fake_orchestrator: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["--log-level", "verbose", "unlock"]) == cli.EXIT_CONFIGURATION
    assert "Configuration error" in capsys.readouterr().err
    fake_orchestrator.factory.assert_not_called()


def test_unknown_log_level_in_environment_exit_code(
    fake_orchestrator: Mock, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("BW_ORCHESTRATOR_LOG_LEVEL", "verbose")

    assert cli.main(["unlock"]) == cli.EXIT_CONFIGURATION
    fake_orchestrator.factory.assert_not_called()


def test_log_level_flag_accepts_lowercase(fake_orchestrator: Mock) -> None:
    assert cli.main(["--log-level", "debug", "unlock"]) == 0

    config = fake_orchestrator.factory.call_args.args[0]
    assert config.log_level == "DEBUG"


def test_unexpected_error_exit_code(fake_orchestrator: Mock) -> None:
    fake_orchestrator.init.side_effect = RuntimeError("boom")

    assert cli.main(["unlock"]) == cli.EXIT_FAILURE
