"""Async subprocess execution for the Bitwarden CLI.

Every invocation gets its own environment mapping built from the current
process environment plus explicit overrides; `os.environ` is never mutated.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from bitwarden_orchestrator.errors import CommandTimedOut

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of a finished process."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error_message(self) -> str:
        """Best human-readable failure text: stderr, falling back to stdout."""

        return self.stderr.strip() or self.stdout.strip()


def build_environment(
    overrides: Mapping[str, str | None],
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return a fresh environment for one invocation.

    `None` overrides are skipped so the base value (if any) is kept.
    """

    env = dict(os.environ if base is None else base)
    for key, value in overrides.items():
        if value is not None:
            env[key] = value
    return env


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
    await proc.wait()


class ProcessRunner:
    """Runs commands without a shell and captures their output."""

    def __init__(self, timeout_seconds: float | None = None) -> None:
        # 0 means no timeout, mirroring the CLI flag.
        self.timeout_seconds = timeout_seconds or None

    async def run(
        self,
        args: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run `args` to completion.

        Raises:
            OSError: If the executable cannot be spawned.
            CommandTimedOut: If the process outlives the timeout.
        """
        logger.debug("Running command", extra={"command": list(args[:3])})

        proc = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(env) if env is not None else None,
        )
        timeout = self.timeout_seconds
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except TimeoutError:
            await _kill(proc)
            raise CommandTimedOut(args, timeout or 0.0) from None
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        result = CommandResult(
            args=tuple(args),
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        logger.debug(
            "Command finished",
            extra={"command": list(args[:3]), "returncode": result.returncode},
        )
        return result
