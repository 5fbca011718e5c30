"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (TYPEBRIDGE_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class Protocol(str, Enum):
    """Scheme used to reach a Typesense node."""

    HTTP = "http"
    HTTPS = "https"


class ConnectionConfig(BaseModel):
    """Connection parameters for a single Typesense server.

    Built once per backend and immutable afterwards. ``protocol`` decides
    whether the transport talks TLS.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="localhost", description="Typesense host name")
    port: int = Field(default=8108, description="Typesense port")
    protocol: Protocol = Field(default=Protocol.HTTP, description="http or https")
    api_key: str = Field(description="Admin API key sent with every request")
    connection_timeout_seconds: float = Field(default=2.0, gt=0, description="Request timeout in seconds")

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("api_key must not be empty")
        return v

    @property
    def base_url(self) -> str:
        return f"{self.protocol.value}://{self.host}:{self.port}"

    @property
    def uses_tls(self) -> bool:
        return self.protocol is Protocol.HTTPS

    def to_array(self) -> dict[str, Any]:
        """Serialize into the node-list shape Typesense clients expect."""
        return {
            "api_key": self.api_key,
            "nodes": [
                {
                    "host": self.host,
                    "port": self.port,
                    "protocol": self.protocol.value,
                },
            ],
            "connection_timeout_seconds": self.connection_timeout_seconds,
        }


class ServerSettings(BaseModel):
    """Admin HTTP server configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=8090, description="Server port")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class AdminSettings(BaseModel):
    """Key administration presentation options."""

    timezone: str = Field(default="UTC", description="IANA timezone used to render key expiry dates")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the TYPEBRIDGE_ prefix.
    Nested settings use double underscores.

    Example:
        TYPEBRIDGE_SERVERS__TYPESENSE__HOST=search.internal
        TYPEBRIDGE_SERVERS__TYPESENSE__API_KEY=xyz
        TYPEBRIDGE_ADMIN__TIMEZONE=Europe/Paris
    """

    model_config = {
        "env_prefix": "TYPEBRIDGE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="typebridge", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    servers: dict[str, ConnectionConfig] = Field(
        default_factory=dict,
        description="Typesense servers keyed by server identifier",
    )
    default_server: str = Field(default="typesense", description="Server identifier used when none is given")

    server: ServerSettings = Field(default_factory=ServerSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def connection(self, server_id: str | None = None) -> ConnectionConfig:
        """Return the connection config for ``server_id`` (or the default server).

        Raises:
            KeyError: If no such server is configured.
        """
        name = server_id or self.default_server
        try:
            return self.servers[name]
        except KeyError:
            raise KeyError(f"No Typesense server configured under '{name}'") from None

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
