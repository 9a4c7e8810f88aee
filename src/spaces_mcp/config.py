"""Configuration for the Spaces MCP server.

Settings are read from environment variables with the ``SPACES_MCP_``
prefix or from a ``.env`` file. The kubeconfig path also honours the
standard ``KUBECONFIG`` variable.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransportMode(str, Enum):
    """MCP transport the server listens on."""

    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


class LogLevel(str, Enum):
    """Logging levels accepted by the server."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# Operations that change cluster or record state
WRITE_OPERATIONS = frozenset({"create", "update", "delete"})


class SpacesConfig(BaseSettings):
    """Configuration for the Spaces MCP server."""

    model_config = SettingsConfigDict(
        env_prefix="SPACES_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Cluster access
    kubeconfig_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "kubeconfig_path", "SPACES_MCP_KUBECONFIG_PATH", "KUBECONFIG"
        ),
        description="Path to kubeconfig file; in-cluster config is used when unset",
    )
    kubeconfig_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use",
    )

    # Server
    transport: TransportMode = Field(
        default=TransportMode.STDIO,
        description="MCP transport mode",
    )
    host: str = Field(default="127.0.0.1", description="Host for HTTP transports")
    port: int = Field(default=8000, ge=1, le=65535, description="Port for HTTP transports")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    # Safety
    read_only_mode: bool = Field(
        default=False,
        description="Reject every operation that creates, updates or deletes spaces",
    )

    # Identity
    admin_groups: list[str] = Field(
        default_factory=lambda: ["spaces-admins"],
        description="Kubernetes groups whose members act with the ADMIN role",
    )

    # Spaces
    tiers_file: str | None = Field(
        default=None,
        description="YAML file overriding the built-in service tier presets",
    )
    max_list_limit: int = Field(
        default=100,
        ge=1,
        description="Maximum number of spaces returned by list operations",
    )

    @property
    def effective_tiers_path(self) -> Path | None:
        """Resolved tiers file path, if configured."""
        if not self.tiers_file:
            return None
        return Path(self.tiers_file).expanduser().resolve()

    def is_operation_allowed(self, operation: str) -> tuple[bool, str | None]:
        """Check whether an operation may run under the current settings.

        Args:
            operation: One of "create", "read", "update", "delete".

        Returns:
            Tuple of (allowed, reason when not allowed).
        """
        if self.read_only_mode and operation in WRITE_OPERATIONS:
            return False, f"Operation '{operation}' is disabled: server is in read-only mode"
        return True, None


@lru_cache
def get_config() -> SpacesConfig:
    """Get the process configuration, loaded once from the environment."""
    return SpacesConfig()
