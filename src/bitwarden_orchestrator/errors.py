"""Errors raised by the orchestrator."""

from __future__ import annotations

from collections.abc import Sequence


class BitwardenError(Exception):
    """Base class for errors raised while driving the Bitwarden CLI."""


class ToolNotInstalled(BitwardenError):
    """The `bw` executable is missing or its version check fails."""


class ConfigurationError(BitwardenError):
    """Server URL missing, or `bw config server` rejected it."""


class LoginFailed(BitwardenError):
    """API-key login failed for a reason other than an existing login."""


class AuthenticationFailed(BitwardenError):
    """The vault could not be unlocked with the master password."""


class ItemListingFailed(BitwardenError):
    """`bw list items` failed or returned output that is not a list of items."""


class CommandTimedOut(BitwardenError):
    """A `bw` invocation ran longer than the configured timeout and was killed."""

    def __init__(self, args: Sequence[str], timeout_seconds: float) -> None:
        self.command = tuple(args)
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Command {' '.join(self.command[:3])!r} timed out after {timeout_seconds:g}s")
