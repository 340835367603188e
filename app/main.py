"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service
or runs one workflow from the command line.
"""

import argparse
import asyncio
import json

import uvicorn

from app.bootstrap import RuntimeComponents, bootstrap_create_application, bootstrap_create_components
from app.config import config_configure_logging, config_load_settings
from app.jobs import BULK_DEMO_STATUS_CONNECTION_MISSING, BULK_DEMO_STATUS_STARTED


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="AppLink multi-org demo runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "query-run", "bulk-demo-run"),
        help="Runtime command: `api` starts server, `query-run` prints accounts from every connection, "
        "`bulk-demo-run` submits the bulk demo and waits for its monitor",
        type=str,
    )
    argument_parser.add_argument(
        "--query",
        dest="query_text",
        type=str,
        help="Optional SOQL override for `query-run`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    config_configure_logging(settings.log_level)

    if parsed_arguments.command == "query-run":
        components = bootstrap_create_components(settings)
        asyncio.run(main_run_query(components, parsed_arguments.query_text or settings.accounts_query))
        return

    if parsed_arguments.command == "bulk-demo-run":
        components = bootstrap_create_components(settings)
        if not asyncio.run(main_run_bulk_demo(components)):
            raise SystemExit(1)
        return

    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


async def main_run_query(components: RuntimeComponents, query_text: str) -> None:
    """Print fan-out outcomes as JSON.

    Args:
        components: Wired runtime components.
        query_text: Query issued to every connection.
    """

    try:
        outcomes = await components.query_runner.job_run_query(query_text)
        print(json.dumps([outcome.to_payload() for outcome in outcomes], indent=2))
    finally:
        await components.authorization_adapter.adapter_close()


async def main_run_bulk_demo(components: RuntimeComponents) -> bool:
    """Run the bulk demo and keep the loop alive until its monitor finishes.

    Args:
        components: Wired runtime components.

    Returns:
        bool: False when the demo connection is not configured.
    """

    try:
        demo_result = await components.bulk_demo_service.bulk_demo_execute()
        print(json.dumps({"status": demo_result.status, "job_id": demo_result.job_id}))
        if demo_result.status == BULK_DEMO_STATUS_STARTED:
            try:
                await components.monitor_registry.registry_wait_idle()
            finally:
                await components.monitor_registry.registry_shutdown()
        return demo_result.status != BULK_DEMO_STATUS_CONNECTION_MISSING
    finally:
        await components.authorization_adapter.adapter_close()


if __name__ == "__main__":
    main()
