"""Bitwarden CLI wrapper.

This keeps `bw` argv and environment details out of the orchestrator and makes
tests easy: each method runs exactly one invocation and returns the captured
result without interpreting it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from bitwarden_orchestrator.bitwarden.process import CommandResult, ProcessRunner, build_environment

logger = logging.getLogger(__name__)

# Environment variables understood by `bw`.
ENV_CLIENT_ID = "BW_CLIENTID"
ENV_CLIENT_SECRET = "BW_CLIENTSECRET"
ENV_PASSWORD = "BW_PASSWORD"
ENV_SESSION = "BW_SESSION"
ENV_APPDATA_DIR = "BITWARDENCLI_APPDATA_DIR"


class BitwardenClient:
    """Issues the `bw` invocations the orchestrator needs.

    Secrets are only ever placed in the child environment, never in argv.
    """

    def __init__(
        self,
        executable: str = "bw",
        runner: ProcessRunner | None = None,
        appdata_dir: Path | None = None,
        interactive: bool = False,
    ) -> None:
        """Initialize the client.

        Args:
            executable: Name or path of the `bw` binary.
            runner: Process runner. Defaults to one without a timeout.
            appdata_dir: Optional `bw` data directory for an isolated profile.
            interactive: Allow `bw` to prompt. Off by default so a missing
                credential fails instead of blocking on stdin.
        """
        self.executable = executable
        self.runner = runner or ProcessRunner()
        self.appdata_dir = appdata_dir
        self.interactive = interactive

    def _command(self, *args: str) -> list[str]:
        command = [self.executable, *args]
        if not self.interactive:
            command.append("--nointeraction")
        return command

    def _environment(self, **overrides: str | None) -> dict[str, str]:
        if self.appdata_dir is not None:
            overrides.setdefault(ENV_APPDATA_DIR, str(self.appdata_dir))
        return build_environment(overrides)

    async def version(self) -> CommandResult:
        return await self.runner.run([self.executable, "--version"], env=self._environment())

    async def config_server(self, url: str) -> CommandResult:
        logger.debug("Setting server URL", extra={"url": url})
        return await self.runner.run(
            self._command("config", "server", url),
            env=self._environment(),
        )

    async def login_apikey(self, client_id: str | None, client_secret: str | None) -> CommandResult:
        return await self.runner.run(
            self._command("login", "--apikey"),
            env=self._environment(
                **{ENV_CLIENT_ID: client_id, ENV_CLIENT_SECRET: client_secret}
            ),
        )

    async def unlock(self, password: str | None) -> CommandResult:
        """Unlock with the master password read by `bw` from `BW_PASSWORD`."""

        return await self.runner.run(
            self._command("unlock", "--passwordenv", ENV_PASSWORD, "--raw"),
            env=self._environment(**{ENV_PASSWORD: password}),
        )

    async def list_items(self, session: str | None) -> CommandResult:
        """List items; a missing session is sent as an empty `BW_SESSION`."""

        return await self.runner.run(
            self._command("list", "items"),
            env=self._environment(**{ENV_SESSION: session or ""}),
        )
