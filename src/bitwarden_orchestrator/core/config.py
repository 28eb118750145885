"""Core configuration for the orchestrator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bitwarden_orchestrator.logging import configure_logging

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Credentials(BaseSettings):
    """Server URL and secrets used to log in and unlock.

    Read from BW_URL, BW_CLIENT_ID, BW_CLIENT_SECRET and BW_PASSWORD unless
    passed explicitly.
    """

    url: str | None = Field(
        default=None,
        description="Bitwarden server URL",
    )
    client_id: str | None = Field(
        default=None,
        description="API key client ID",
    )
    client_secret: SecretStr | None = Field(
        default=None,
        description="API key client secret",
    )
    password: SecretStr | None = Field(
        default=None,
        description="Master password",
    )

    model_config = SettingsConfigDict(
        env_prefix="BW_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def resolve(
        cls,
        url: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        password: str | None = None,
    ) -> Credentials:
        """Build credentials where explicit values win over the environment.

        Empty strings count as "not given" and fall back to the environment.
        """
        explicit = {
            "url": url,
            "client_id": client_id,
            "client_secret": client_secret,
            "password": password,
        }
        return cls(**{key: value for key, value in explicit.items() if value})

    def secret(self, name: Literal["client_secret", "password"]) -> str | None:
        value: SecretStr | None = getattr(self, name)
        return value.get_secret_value() if value is not None else None


class BitwardenCliConfig(BaseSettings):
    """Configuration for invoking the `bw` executable."""

    executable: str = Field(
        default="bw",
        description="Name or path of the Bitwarden CLI binary",
    )
    timeout_seconds: float = Field(
        default=60.0,
        ge=0.0,
        description="Per-invocation timeout in seconds (0 = no timeout)",
    )
    configure_server: bool = Field(
        default=True,
        description="Run `bw config server` with the configured URL before login",
    )
    interactive: bool = Field(
        default=False,
        description="Let `bw` prompt for missing input instead of failing",
    )
    appdata_dir: Path | None = Field(
        default=None,
        description="Data directory for an isolated `bw` profile",
    )

    model_config = SettingsConfigDict(
        env_prefix="BW_CLI_",
        env_file=".env",
        extra="ignore",
    )


class OrchestratorConfig(BaseSettings):
    """Main configuration for the orchestrator."""

    log_level: LogLevel = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    credentials: Credentials = Field(
        default_factory=Credentials,
        description="Login and unlock credentials",
    )
    cli: BitwardenCliConfig = Field(
        default_factory=BitwardenCliConfig,
        description="Bitwarden CLI configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="BW_ORCHESTRATOR_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level, fmt=self.log_format)

        if self.debug:
            logging.getLogger("bitwarden_orchestrator").setLevel(logging.DEBUG)
