"""Core package initialization."""

from bitwarden_orchestrator.core.config import BitwardenCliConfig, Credentials, OrchestratorConfig
from bitwarden_orchestrator.core.orchestrator import Orchestrator

__all__ = [
    "BitwardenCliConfig",
    "Credentials",
    "Orchestrator",
    "OrchestratorConfig",
]
