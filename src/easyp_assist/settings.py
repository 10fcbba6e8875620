"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_FILE = "easyp.yaml"


class Settings(BaseSettings):
    """Configuration for the easyp-assist REST and MCP servers.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # easyp CLI
    easyp_cli_path: str | None = None  # falls back to "easyp" on PATH
    config_path: str | None = None  # relative paths resolve against project_root
    project_root: str | None = None
    validate_timeout_seconds: float = 1.5
    validate_debounce_ms: int = 500
    validate_cache_size: int = 64  # cached (target, content hash) results

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    max_request_body_bytes: int = 2 * 1024 * 1024

    # MCP
    mcp_transport: str = "stdio"
    mcp_server_host: str = "localhost"
    mcp_server_port: int = 9000

    @property
    def cli_executable(self) -> str:
        path = (self.easyp_cli_path or "").strip()
        return path or "easyp"

    @property
    def configured_path(self) -> str:
        path = (self.config_path or "").strip()
        return path or DEFAULT_CONFIG_FILE
