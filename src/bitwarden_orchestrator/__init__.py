"""Bitwarden CLI Orchestrator.

Drives the `bw` command-line tool through install check, server
configuration, API-key login and vault unlock, then lists vault items:
- configuration loaded from the environment and `.env`
- structured logging
- a small CLI surface
"""

__version__ = "0.1.0"

from bitwarden_orchestrator.core.config import Credentials, OrchestratorConfig
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

__all__ = [
    "__version__",
    "AuthenticationFailed",
    "BitwardenError",
    "CommandTimedOut",
    "ConfigurationError",
    "Credentials",
    "ItemListingFailed",
    "LoginFailed",
    "Orchestrator",
    "OrchestratorConfig",
    "ToolNotInstalled",
]
