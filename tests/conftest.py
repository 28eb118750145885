"""Test configuration and fixtures."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from bitwarden_orchestrator.bitwarden.client import BitwardenClient
from bitwarden_orchestrator.bitwarden.process import CommandResult
from bitwarden_orchestrator.core.config import (
    BitwardenCliConfig,
    Credentials,
    OrchestratorConfig,
)
from bitwarden_orchestrator.logging import HANDLER_NAME

_ENV_VARS = [
    "BW_URL",
    "BW_CLIENT_ID",
    "BW_CLIENT_SECRET",
    "BW_PASSWORD",
    "BW_SESSION",
    "BW_CLI_EXECUTABLE",
    "BW_CLI_TIMEOUT_SECONDS",
    "BW_CLI_CONFIGURE_SERVER",
    "BW_CLI_INTERACTIVE",
    "BW_CLI_APPDATA_DIR",
    "BW_ORCHESTRATOR_LOG_LEVEL",
    "BW_ORCHESTRATOR_LOG_FORMAT",
    "BW_ORCHESTRATOR_DEBUG",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment and .env out of every test."""
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Drop the handler installed by configure_logging."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
    root.setLevel(level)


def _make_result(returncode: int = 0, stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(args=("bw",), returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def make_result() -> Callable[..., CommandResult]:
    """Provide a factory for captured `bw` results."""
    return _make_result


@pytest.fixture
def credentials() -> Credentials:
    """Provide test credentials."""
    return Credentials(
        url="https://vault.example.com",
        client_id="user.client-id",
        client_secret="client-secret",
        password="master-password",
    )


@pytest.fixture
def orchestrator_config(credentials: Credentials) -> OrchestratorConfig:
    """Provide a test orchestrator configuration."""
    return OrchestratorConfig(
        log_level="DEBUG",
        debug=True,
        credentials=credentials,
        cli=BitwardenCliConfig(timeout_seconds=5.0),
    )


@pytest.fixture
def mock_client() -> Mock:
    """Provide a BitwardenClient whose invocations all succeed."""
    client = Mock(spec=BitwardenClient)
    client.version = AsyncMock(return_value=_make_result(stdout="2024.9.0\n"))
    client.config_server = AsyncMock(return_value=_make_result(stdout="Saved setting `config`.\n"))
    client.login_apikey = AsyncMock(return_value=_make_result(stdout="You are logged in!\n"))
    client.unlock = AsyncMock(return_value=_make_result(stdout="abc123\n"))
    client.list_items = AsyncMock(return_value=_make_result(stdout="[]"))
    return client
