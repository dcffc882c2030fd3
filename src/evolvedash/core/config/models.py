"""
Configuration data models for evolvedash.

These models define the structure of .evolvedash.json and
~/.config/evolvedash/config.json files, with validation and type safety
via Pydantic.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServerConfig(BaseModel):
    """HTTP server settings for the dashboard API."""

    host: str = Field(default="127.0.0.1", description="Interface to bind the API server to")
    port: int = Field(default=3001, ge=1, le=65535, description="Port to bind the API server to")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )


class StorageConfig(BaseModel):
    """
    Locations of persisted state.

    Relative paths are resolved against the project root.
    """

    db_path: str = Field(
        default=".evolvedash/dashboard.db",
        description="SQLite database holding the feature request history",
    )
    spec_path: str = Field(
        default=".evolvedash/spec.yaml",
        description="YAML spec document with declared features and workflows",
    )
    manifest_path: str = Field(
        default=".evolvedash/components.json",
        description="Generation manifest recording when each component was generated",
    )
    create_spec_if_missing: bool = Field(
        default=True,
        description="Create a default spec document at startup when none exists",
    )


class DiscoveryConfig(BaseModel):
    """
    Rules for discovering generated UI components.

    A file qualifies when its suffix is in `extensions`, it does not end with
    one of `test_suffixes`, and its name contains none of the `denylist` tokens.
    """

    components_dir: str = Field(
        default="frontend/src/components/generated",
        description="Directory the generator writes components into",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".tsx"],
        description="File suffixes that identify a generated component",
    )
    test_suffixes: list[str] = Field(
        default_factory=lambda: [".test.tsx", ".spec.tsx"],
        description="File suffixes that identify test files",
    )
    denylist: list[str] = Field(
        default_factory=lambda: ["Widget"],
        description="Filename tokens excluded from discovery (legacy naming)",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Every extension must start with a dot."""
        for ext in v:
            if not ext.startswith("."):
                raise ValueError(f"Extension '{ext}' must start with '.'")
        return v


class GeneratorConfig(BaseModel):
    """
    External code generator settings.

    The 'claude-cli' backend shells out to the `claude` CLI. The 'command'
    backend runs `command` verbatim, substituting `{prompt}` in its arguments.
    """

    backend: str = Field(default="claude-cli", description="Generator backend name")
    command: list[str] = Field(
        default_factory=list,
        description="Argument vector for the 'command' backend (e.g. ['kiro', 'generate'])",
    )
    model: Optional[str] = Field(default=None, description="Model to request from the backend")
    timeout_seconds: int = Field(
        default=300,
        ge=1,
        description="Give up on a generator run after this many seconds",
    )
    system_prompt: Optional[str] = Field(
        default=None,
        description="Override the instructions sent alongside each request",
    )


class RequestsConfig(BaseModel):
    """Feature request intake limits."""

    max_description_length: int = Field(
        default=2000,
        ge=1,
        description="Reject descriptions longer than this many characters",
    )
    recent_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many recent requests the dashboard shows",
    )


class OperationLogConfig(BaseModel):
    """In-memory operation log settings."""

    capacity: int = Field(
        default=100,
        ge=1,
        description="Entries kept before the oldest is evicted",
    )


class LoggingConfig(BaseModel):
    """Process logging settings."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class DashConfig(BaseModel):
    """
    Main evolvedash configuration model.

    Loaded from multiple sources with precedence:
    env vars > project config > user config > defaults
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    requests: RequestsConfig = Field(default_factory=RequestsConfig)
    oplog: OperationLogConfig = Field(default_factory=OperationLogConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        extra="ignore",  # Unknown keys in config files are tolerated
    )

    def resolve(self, project_dir: Path, value: str) -> Path:
        """
        Resolve a configured path against the project root.

        Args:
            project_dir: Project root directory
            value: Path from the config (absolute or project-relative)

        Returns:
            Absolute path
        """
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return project_dir / path
