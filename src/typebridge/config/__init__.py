"""Configuration — connection parameters and application settings."""

from typebridge.config.settings import ConnectionConfig, Protocol, Settings

__all__ = ["ConnectionConfig", "Protocol", "Settings"]
