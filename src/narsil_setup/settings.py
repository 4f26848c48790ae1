"""Environment-based configuration using pydantic-settings.

Settings load from ``NARSIL_SETUP_*`` environment variables and an optional
``.env`` file. CLI options take precedence over anything loaded here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVER_NAME = "narsil-mcp"
DEFAULT_SERVER_COMMAND = "narsil-mcp"
DEFAULT_SERVER_ARGS = ["--repos", ".", "--neural"]


@dataclass(frozen=True)
class ServerDefaults:
    """Launch fields written when the server entry does not exist yet."""

    name: str = DEFAULT_SERVER_NAME
    command: str = DEFAULT_SERVER_COMMAND
    args: List[str] = field(default_factory=lambda: list(DEFAULT_SERVER_ARGS))

    def entry(self) -> dict:
        return {"command": self.command, "args": list(self.args)}


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="NARSIL_SETUP_", case_sensitive=False, extra="ignore"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Application log level")
    log_format: str = Field(default="text", description="Log format: json or text")

    # Editor discovery
    workspace_dir: Optional[Path] = Field(
        default=None, description="Project directory for VS Code/JetBrains configs (default: cwd)"
    )

    # Server entry scaffolding
    server_name: str = Field(default=DEFAULT_SERVER_NAME)
    server_command: str = Field(default=DEFAULT_SERVER_COMMAND)
    server_args: List[str] = Field(default_factory=lambda: list(DEFAULT_SERVER_ARGS))

    # Credential probe
    verify_timeout: float = Field(default=10.0, description="Probe timeout in seconds")
    voyage_api_base: str = Field(default="https://api.voyageai.com/v1")
    openai_api_base: str = Field(default="https://api.openai.com/v1")
    custom_api_base: Optional[str] = Field(
        default=None, description="OpenAI-compatible base URL for the custom provider"
    )

    @field_validator("log_format")
    def validate_log_format(cls, v):
        if v.lower() not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v.lower()

    @field_validator("verify_timeout")
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("verify_timeout must be positive")
        return v

    def server_defaults(self) -> ServerDefaults:
        return ServerDefaults(
            name=self.server_name,
            command=self.server_command,
            args=list(self.server_args),
        )


__all__ = ["AppSettings", "ServerDefaults"]
