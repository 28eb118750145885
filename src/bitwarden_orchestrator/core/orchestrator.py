"""Main orchestrator implementation."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from bitwarden_orchestrator.bitwarden.client import BitwardenClient
from bitwarden_orchestrator.bitwarden.models import VaultItem, parse_items
from bitwarden_orchestrator.bitwarden.process import ProcessRunner
from bitwarden_orchestrator.core.config import Credentials, OrchestratorConfig
from bitwarden_orchestrator.errors import (
    AuthenticationFailed,
    ConfigurationError,
    ItemListingFailed,
    LoginFailed,
    ToolNotInstalled,
)

logger = logging.getLogger(__name__)

ALREADY_LOGGED_IN_MARKER = "already logged in"


class Orchestrator:
    """Drives the Bitwarden CLI from install check to an unlocked session.

    The session token lives only on this instance; it is never persisted.
    Every failure is raised to the caller, who decides whether to exit.
    """

    def __init__(
        self,
        config: OrchestratorConfig | None = None,
        *,
        credentials: Credentials | None = None,
        client: BitwardenClient | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Configuration object. If None, loads from environment.
            credentials: Overrides `config.credentials`.
            client: Bitwarden CLI wrapper. If None, one is built from `config.cli`.
        """
        self.config = config or OrchestratorConfig()
        self.credentials = credentials or self.config.credentials

        cli = self.config.cli
        self.client = client or BitwardenClient(
            executable=cli.executable,
            runner=ProcessRunner(timeout_seconds=cli.timeout_seconds),
            appdata_dir=cli.appdata_dir,
            interactive=cli.interactive,
        )

        self._session: str | None = None

    async def init(self) -> None:
        """Run the full sequence: install check, server config, login, unlock."""
        await self.check_installed()
        if self.config.cli.configure_server:
            await self.set_server_url()
        await self.login()
        await self.unlock()

    async def check_installed(self) -> str:
        """Check that `bw` runs.

        Returns:
            The reported CLI version.

        Raises:
            ToolNotInstalled: If the binary is missing or exits non-zero.
        """
        try:
            result = await self.client.version()
        except OSError as e:
            raise ToolNotInstalled(
                "Bitwarden CLI is not installed. Please install it first."
            ) from e

        if not result.ok:
            raise ToolNotInstalled("Bitwarden CLI is not installed. Please install it first.")

        version = result.stdout.strip()
        logger.info("Bitwarden CLI found", extra={"version": version})
        return version

    async def set_server_url(self) -> None:
        """Point `bw` at the configured server.

        Raises:
            ConfigurationError: If no URL is configured or `bw` rejects it.
        """
        url = self.credentials.url
        if not url:
            raise ConfigurationError("Bitwarden server URL is not provided.")

        try:
            result = await self.client.config_server(url)
        except OSError as e:
            raise ConfigurationError(f"Failed to set Bitwarden server URL: {e}") from e

        if not result.ok:
            raise ConfigurationError(f"Failed to set Bitwarden server URL: {result.error_message}")

        logger.info("Bitwarden server URL set", extra={"url": url})

    async def login(self) -> str | None:
        """Log in with the API key.

        Returns:
            The CLI output, or None if an existing login was reused.

        Raises:
            LoginFailed: For any failure other than "already logged in".
        """
        try:
            result = await self.client.login_apikey(
                self.credentials.client_id,
                self.credentials.secret("client_secret"),
            )
        except OSError as e:
            raise LoginFailed("Login failed. Please check your credentials.") from e

        if result.ok:
            logger.info("Logged in to Bitwarden")
            return result.stdout

        output = f"{result.stderr}\n{result.stdout}".lower()
        if ALREADY_LOGGED_IN_MARKER in output:
            logger.info("Already logged in to Bitwarden")
            return None

        logger.debug("Login rejected", extra={"returncode": result.returncode})
        raise LoginFailed("Login failed. Please check your credentials.")

    async def unlock(self) -> str:
        """Unlock the vault and keep the session token.

        Returns:
            The trimmed session token.

        Raises:
            AuthenticationFailed: If `bw` cannot unlock the vault.
        """
        try:
            result = await self.client.unlock(self.credentials.secret("password"))
        except OSError as e:
            raise AuthenticationFailed(f"Authentication failed: {e}") from e

        if not result.ok:
            raise AuthenticationFailed(f"Authentication failed: {result.error_message}")

        token = result.stdout.strip()
        if not token:
            raise AuthenticationFailed("Authentication failed: bw returned an empty session token")

        self._session = token
        logger.info("Vault unlocked")
        return self._session

    async def list_items(self) -> list[VaultItem]:
        """List every item in the vault.

        Not guarded: without a prior unlock `bw` receives an empty session and
        its rejection is raised as ItemListingFailed.

        Raises:
            ItemListingFailed: If `bw` fails or its output cannot be decoded.
        """
        try:
            result = await self.client.list_items(self._session)
        except OSError as e:
            raise ItemListingFailed(f"Failed to list items: {e}") from e

        if not result.ok:
            raise ItemListingFailed(f"Failed to list items: {result.error_message}")

        try:
            items = parse_items(result.stdout)
        except ValidationError as e:
            raise ItemListingFailed(
                f"Failed to list items: unexpected output ({e.error_count()} errors)"
            ) from e

        logger.info("Listed vault items", extra={"count": len(items)})
        return items

    def current_session(self) -> str | None:
        """Return the session token, or None before a successful unlock."""
        return self._session
