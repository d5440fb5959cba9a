"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified; its values are passed as init kwargs)
  2. Environment variables (EVENTSCOUT_ prefix) and `.env`
  3. Default values

Nested sections are deep-merged, so a YAML file can set
`ticketmaster.country_code` while the API key comes from the environment.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class MongoSettings(BaseModel):
    """Local event store (MongoDB) configuration."""

    uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection URI")
    database: str = Field(default="events", description="Database holding the event collections")
    events_collection: str = Field(default="events", description="Collection of locally owned events")
    users_collection: str = Field(default="users", description="Collection used to expand organizers")
    server_selection_timeout_ms: int = Field(
        default=5000,
        description="How long to wait for a reachable server before failing a query",
    )


class TicketmasterSettings(BaseModel):
    """External discovery provider (Ticketmaster Discovery API v2) configuration.

    The provider only contributes results when ``enabled`` is true *and* an
    ``api_key`` is set; otherwise searches return local results only.
    """

    enabled: bool = Field(default=True, description="Whether external augmentation is allowed at all")
    api_key: str = Field(default="", description="Ticketmaster consumer key")
    base_url: str = Field(
        default="https://app.ticketmaster.com/discovery/v2",
        description="Discovery API base URL",
    )
    country_code: str = Field(default="US", description="Region constant sent with every query")
    sort: str = Field(default="date,asc", description="Provider sort order")
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    @field_validator("api_key", mode="before")
    @classmethod
    def _strip_api_key(cls, v: object) -> str:
        return str(v).strip() if v is not None else ""


class SearchSettings(BaseModel):
    """Search behavior configuration."""

    reject_invalid_dates: bool = Field(
        default=True,
        description=(
            "Reject requests whose dateFrom/dateTo cannot be parsed (HTTP 400). "
            "When false, an unparseable bound silently matches no local events."
        ),
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the EVENTSCOUT_ prefix.
    Nested settings use double underscores: EVENTSCOUT_SERVER__PORT=9090

    Example:
        EVENTSCOUT_MONGODB__URI=mongodb://db:27017
        EVENTSCOUT_TICKETMASTER__API_KEY=abc123
        EVENTSCOUT_SEARCH__REJECT_INVALID_DATES=false
    """

    model_config = {
        "env_prefix": "EVENTSCOUT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="EventScout", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    server: ServerSettings = Field(default_factory=ServerSettings)
    mongodb: MongoSettings = Field(default_factory=MongoSettings)
    ticketmaster: TicketmasterSettings = Field(default_factory=TicketmasterSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
