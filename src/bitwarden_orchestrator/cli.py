"""CLI entrypoint for the Bitwarden orchestrator."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from bitwarden_orchestrator import __version__
from bitwarden_orchestrator.core.config import BitwardenCliConfig, Credentials, OrchestratorConfig
from bitwarden_orchestrator.core.orchestrator import Orchestrator
from bitwarden_orchestrator.errors import (
    AuthenticationFailed,
    BitwardenError,
    CommandTimedOut,
    ConfigurationError,
    ItemListingFailed,
    LoginFailed,
    ToolNotInstalled,
)

logger = logging.getLogger(__name__)

# Exit codes are designed to be CI-friendly.
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2
EXIT_TOOL_NOT_INSTALLED = 3
EXIT_LOGIN_FAILED = 4
EXIT_AUTHENTICATION_FAILED = 5
EXIT_LISTING_FAILED = 6
EXIT_TIMEOUT = 7

_EXIT_CODES: dict[type[BitwardenError], int] = {
    ConfigurationError: EXIT_CONFIGURATION,
    ToolNotInstalled: EXIT_TOOL_NOT_INSTALLED,
    LoginFailed: EXIT_LOGIN_FAILED,
    AuthenticationFailed: EXIT_AUTHENTICATION_FAILED,
    ItemListingFailed: EXIT_LISTING_FAILED,
    CommandTimedOut: EXIT_TIMEOUT,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bw-orchestrator",
        description="Log in to Bitwarden through the `bw` CLI, unlock the vault and list items",
    )
    parser.add_argument(
        "--version", action="version", version=f"bitwarden-orchestrator {__version__}"
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Bitwarden server URL (overrides BW_URL)",
    )
    parser.add_argument(
        "--skip-server-config",
        action="store_true",
        help="Do not run `bw config server` before logging in",
    )
    parser.add_argument(
        "--timeout-seconds",
        type=float,
        default=None,
        help="Per-invocation timeout in seconds (0 means no timeout)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (overrides BW_ORCHESTRATOR_LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    unlock = subparsers.add_parser("unlock", help="Log in and unlock the vault")
    unlock.add_argument(
        "--print-session",
        action="store_true",
        help="Print the session token to stdout",
    )

    list_items = subparsers.add_parser(
        "list-items",
        help="Log in, unlock the vault and print all items as JSON",
    )
    list_items.add_argument(
        "--compact",
        action="store_true",
        help="Print the JSON array on a single line",
    )

    return parser


def _load_config(args: argparse.Namespace) -> OrchestratorConfig:
    # Overrides go through the constructors so they are validated like the environment.
    overrides: dict[str, object] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.url:
        overrides["credentials"] = Credentials.resolve(url=args.url)

    cli_updates: dict[str, object] = {}
    if args.skip_server_config:
        cli_updates["configure_server"] = False
    if args.timeout_seconds is not None:
        cli_updates["timeout_seconds"] = args.timeout_seconds
    if cli_updates:
        overrides["cli"] = BitwardenCliConfig(**cli_updates)

    return OrchestratorConfig(**overrides)


async def _run(args: argparse.Namespace, orchestrator: Orchestrator) -> int:
    await orchestrator.init()

    if args.command == "unlock":
        if args.print_session:
            print(orchestrator.current_session())
        else:
            print("Vault unlocked")
        return EXIT_OK

    if args.command == "list-items":
        items = await orchestrator.list_items()
        payload = [item.to_dict() for item in items]
        print(json.dumps(payload, indent=None if args.compact else 2, ensure_ascii=False))
        return EXIT_OK

    logger.error("Unknown command", extra={"command": args.command})
    return EXIT_CONFIGURATION


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIGURATION

    config.setup_logging()

    try:
        return asyncio.run(_run(args, Orchestrator(config)))

    except BitwardenError as e:
        logger.debug("Command failed", extra={"error": type(e).__name__}, exc_info=True)
        print(f"❌ {e}", file=sys.stderr)
        return _EXIT_CODES.get(type(e), EXIT_FAILURE)

    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
