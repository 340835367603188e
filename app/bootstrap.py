"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import FastAPI

from app.adapters import AppLinkAuthorizationAdapter
from app.api import create_api_application
from app.config import AppSettings, config_load_settings
from app.jobs import (
    BulkDemoConfig,
    BulkDemoService,
    BulkJobMonitor,
    BulkJobMonitorRegistry,
    QueryFanOutRunner,
)


@dataclass(frozen=True)
class RuntimeComponents:
    """Wired runtime components shared by HTTP and CLI surfaces.

    Attributes:
        settings: Validated runtime settings.
        authorization_adapter: AppLink adapter owning the HTTP client.
        query_runner: Multi-connection query runner.
        monitor_registry: Background monitor registry.
        bulk_demo_service: Bulk demo workflow.
    """

    settings: AppSettings
    authorization_adapter: AppLinkAuthorizationAdapter
    query_runner: QueryFanOutRunner
    monitor_registry: BulkJobMonitorRegistry
    bulk_demo_service: BulkDemoService


def bootstrap_create_components(settings: AppSettings | None = None) -> RuntimeComponents:
    """Assemble runtime components from validated settings.

    Args:
        settings: Optional preloaded settings; loaded from environment when omitted.

    Returns:
        RuntimeComponents: Fully wired component set.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
        ValueError: Raised when AppLink credentials are blank.
    """

    resolved_settings = settings or config_load_settings()
    authorization_adapter = AppLinkAuthorizationAdapter(
        api_url=resolved_settings.heroku_applink_api_url,
        token=resolved_settings.heroku_applink_token,
        app_id=resolved_settings.heroku_app_id,
        default_api_version=resolved_settings.salesforce_api_version,
        request_timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    query_runner = QueryFanOutRunner(
        authorization_adapter=authorization_adapter,
        connection_names=resolved_settings.connection_names,
    )
    monitor_registry = BulkJobMonitorRegistry(
        monitor=BulkJobMonitor(
            poll_interval_seconds=resolved_settings.bulk_monitor_poll_interval_seconds,
            max_wait_seconds=resolved_settings.bulk_monitor_max_wait_seconds,
        )
    )
    bulk_demo_service = BulkDemoService(
        authorization_adapter=authorization_adapter,
        monitor_registry=monitor_registry,
        config=BulkDemoConfig(
            connection_names=resolved_settings.connection_names,
            demo_connection_name=resolved_settings.bulk_demo_connection_name,
            record_count=resolved_settings.bulk_demo_record_count,
        ),
    )
    return RuntimeComponents(
        settings=resolved_settings,
        authorization_adapter=authorization_adapter,
        query_runner=query_runner,
        monitor_registry=monitor_registry,
        bulk_demo_service=bulk_demo_service,
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    components = bootstrap_create_components(settings)
    return create_api_application(
        settings=components.settings,
        query_runner=components.query_runner,
        bulk_demo_service=components.bulk_demo_service,
        monitor_registry=components.monitor_registry,
        shutdown_hooks=(components.authorization_adapter.adapter_close,),
    )
