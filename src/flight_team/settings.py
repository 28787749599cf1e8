"""Settings for the flight team provisioning workflow."""

from typing import Optional

from pydantic import AliasChoices
from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

DEFAULT_GRAPH_ENDPOINT = "https://graph.microsoft.com/beta"


class Settings(BaseSettings):
    """
    Settings for the flight team provisioning workflow.

    [pydantic.BaseSettings](https://docs.pydantic.dev/latest/concepts/pydantic_settings/) reads
    configuration values from environment variables and an optional .env file. Values are loaded
    once when the Settings object is created and are never mutated afterwards.

    Environment variable names are treated case-insensitively. The legacy Azure Functions names
    (TeamAppToInstall, TenantName) are accepted as well as the snake_case names.
    """

    # Team content
    team_app_to_install: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("team_app_to_install", "teamapptoinstall"),
    )
    """Teams app catalog id to install into every new team (optional, absence skips the install)."""

    tenant_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("tenant_name", "tenantname"),
    )
    """Tenant name used to build Planner deep links for the pre-flight checklist tab."""

    # Microsoft Graph
    graph_endpoint: str = DEFAULT_GRAPH_ENDPOINT
    """Base URL for Microsoft Graph requests."""

    graph_retry_backoff_seconds: float = 3.0
    """Fixed delay between retry attempts of a Graph call that opted into retries."""

    graph_request_timeout_seconds: float = 30.0
    """Timeout applied to every Graph request."""

    # Capabilities
    enable_planner_stage: bool = False
    """Create the Planner checklist. Requires delegated credentials; app-only tokens are rejected."""

    # Logging
    log_level: str = "INFO"
    """Minimum level for the console log sink."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",  # Load from .env file if it exists (local development)
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined in the model
        populate_by_name=True,
        validate_default=True,
    )
