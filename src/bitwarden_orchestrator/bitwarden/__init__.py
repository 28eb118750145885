"""Bitwarden CLI integration: process execution, invocations and item models."""

from bitwarden_orchestrator.bitwarden.client import BitwardenClient
from bitwarden_orchestrator.bitwarden.models import VaultItem, VaultItemLogin, VaultItemUri, parse_items
from bitwarden_orchestrator.bitwarden.process import CommandResult, ProcessRunner, build_environment

__all__ = [
    "BitwardenClient",
    "CommandResult",
    "ProcessRunner",
    "VaultItem",
    "VaultItemLogin",
    "VaultItemUri",
    "build_environment",
    "parse_items",
]
