"""Typed runtime settings with dotenv support and startup validation."""

import logging
from typing import Annotated

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and org connectivity.

    Environment variable names map directly to field names in uppercase.
    Example: `connection_names` reads from `CONNECTION_NAMES`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port, read from `PORT`.
        connection_names: Configured AppLink connection names, in order.
        heroku_applink_api_url: AppLink add-on API base URL.
        heroku_applink_token: AppLink add-on bearer token.
        heroku_app_id: Heroku application UUID sent with authorization calls.
        salesforce_api_version: Fallback REST API version for org sessions.
        http_timeout_seconds: Outbound HTTP timeout.
        accounts_query: SOQL issued by the accounts listing.
        bulk_demo_connection_name: Connection used by the bulk demo.
        bulk_demo_record_count: Number of synthetic accounts submitted by the bulk demo.
        bulk_monitor_poll_interval_seconds: Delay between bulk job status polls.
        bulk_monitor_max_wait_seconds: Optional overall bound for one monitor.
        log_level: Root logging level name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=5006, ge=1, le=65535, alias="PORT")
    connection_names: Annotated[tuple[str, ...], NoDecode] = Field(default=())
    heroku_applink_api_url: str = Field(min_length=1)
    heroku_applink_token: str = Field(min_length=1)
    heroku_app_id: str = Field(default="")
    salesforce_api_version: str = Field(default="62.0", min_length=1)
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    accounts_query: str = Field(default="SELECT Name, Id FROM Account", min_length=1)
    bulk_demo_connection_name: str = Field(default="empty-org", min_length=1)
    bulk_demo_record_count: int = Field(default=1000, ge=1)
    bulk_monitor_poll_interval_seconds: float = Field(default=5.0, gt=0)
    bulk_monitor_max_wait_seconds: float | None = Field(default=None, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("connection_names", mode="before")
    @classmethod
    def _split_connection_names(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            # Entries are kept as written; the query runner trims each one.
            if not value.strip():
                return ()
            return tuple(value.split(","))
        return tuple(str(item) for item in value)

    @field_validator(
        "heroku_applink_api_url",
        "heroku_applink_token",
        "bulk_demo_connection_name",
        "salesforce_api_version",
    )
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in logging.getLevelNamesMapping():
            raise ValueError(f"unsupported log level {value!r}")
        return normalized_value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_configure_logging(level: str = "INFO") -> None:
    """Install the process-wide log format and level.

    Args:
        level: Logging level name.

    Returns:
        None: Configures the root logger as side effect.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
