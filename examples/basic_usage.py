#!/usr/bin/env python3
"""Programmatic vault listing example.

This demonstrates using the orchestrator directly instead of the CLI:

* load settings from the environment / `.env`
* log in and unlock the vault
* print the name of every item

Credentials are read from BW_URL, BW_CLIENT_ID, BW_CLIENT_SECRET and
BW_PASSWORD; only the server URL can be passed as an argument.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from bitwarden_orchestrator import BitwardenError, Credentials, Orchestrator, OrchestratorConfig


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List Bitwarden vault items (programmatic example).")
    parser.add_argument("--url", default=None, help="Bitwarden server URL (optional)")
    return parser.parse_args(argv)


async def _list_names(orchestrator: Orchestrator) -> list[str]:
    await orchestrator.init()
    items = await orchestrator.list_items()
    return [item.name or item.id for item in items]


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = OrchestratorConfig()
    config.setup_logging()

    orchestrator = Orchestrator(config, credentials=Credentials.resolve(url=args.url))

    try:
        names = asyncio.run(_list_names(orchestrator))
    except BitwardenError as exc:
        print(str(exc))
        return 1

    for name in names:
        print(name)
    print(f"{len(names)} items")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
