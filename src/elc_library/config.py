"""Configuration management for the ELC Library server.

Settings are read from ``ELC_LIBRARY_*`` environment variables (or a local
``.env`` file) and validated with pydantic-settings:

1. Server metadata - name and version announced during the MCP handshake
2. Storage - where the per-profile storage area lives on disk
3. Circulation - loan period and catalog seeding
4. Assistant - sampling preferences for the pedagogy assistant
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LibraryConfig(BaseSettings):
    """ELC Library configuration.

    Every field can be overridden with an environment variable named after it,
    e.g. ``ELC_LIBRARY_LOAN_PERIOD_DAYS=21``.
    """

    model_config = SettingsConfigDict(
        env_prefix="ELC_LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    # === Server Metadata ===

    server_name: str = Field(
        default="elc-library",
        description="MCP server name used in protocol handshake",
        pattern=r"^[a-z0-9-]+$",
    )

    server_version: str = Field(
        default="0.1.0",
        description="Server version for capability negotiation",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    # === Storage ===

    database_path: Path = Field(
        default=Path("data/elc_library.db"),
        description="SQLite file backing the storage area (one per profile)",
    )

    # === Transport ===

    transport: str = Field(
        default="stdio",
        description="Primary transport mechanism",
        pattern=r"^(stdio|streamable_http)$",
    )

    http_host: str = Field(
        default="127.0.0.1",
        description="HTTP server host for Streamable HTTP transport",
    )

    http_port: int = Field(
        default=8080,
        description="HTTP server port for Streamable HTTP transport",
        ge=1024,
        le=65535,
    )

    # === Circulation ===

    loan_period_days: int = Field(
        default=30,
        description="Days between checkout and due date",
        ge=1,
        le=365,
    )

    seed_catalog: bool = Field(
        default=True,
        description="Load the ELC starter collection when no catalog is stored",
    )

    institution_name: str = Field(
        default="Pharos University Alexandria",
        description="Institution named in the assistant's role instruction",
        min_length=1,
    )

    # === Assistant ===

    enable_assistant: bool = Field(
        default=True,
        description="Expose the pedagogy assistant tool",
    )

    assistant_model_hint: str = Field(
        default="gemini-3-flash-preview",
        description="Model name hinted to the client when sampling",
    )

    assistant_max_tokens: int = Field(
        default=800,
        description="Maximum tokens requested for an assistant reply",
        ge=50,
        le=8000,
    )

    assistant_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for assistant replies",
        ge=0.0,
        le=1.0,
    )

    # === Development ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging for protocol messages",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Resolve the database path and make sure its directory exists."""
        abs_path = v.absolute()
        abs_path.parent.mkdir(parents=True, exist_ok=True)

        if not abs_path.parent.is_dir():
            raise ValueError(f"Database directory {abs_path.parent} is not accessible")

        return abs_path

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        """Keep server names short enough for client menus."""
        if len(v) < 3:
            raise ValueError("Server name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Server name must not exceed 50 characters")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.debug or self.log_level == "DEBUG"

    @property
    def server_info(self) -> dict[str, str]:
        """Server information sent during the MCP handshake."""
        return {
            "name": self.server_name,
            "version": self.server_version,
            "transport": self.transport,
        }

    def get_database_url(self) -> str:
        """Get the SQLAlchemy URL of the storage area."""
        return f"sqlite:///{self.database_path}"


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: LibraryConfig | None = None


def get_config() -> LibraryConfig:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibraryConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration so the next ``get_config()`` re-reads the environment."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
