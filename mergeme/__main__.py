"""Command line entry point: ``python -m mergeme``.

Reads the webhook payload from ``GITHUB_EVENT_PATH`` and the action inputs
from ``INPUT_*`` variables, then merges eligible pull requests.
"""

import asyncio
import json
import logging
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from mergeme.client import MergeMeClient
from mergeme.config import Settings
from mergeme.exceptions import ConfigurationError
from mergeme.handlers import continuous_integration_end
from mergeme.logging import configure_logging, get_logger

app = App(help="Merge pull requests once continuous integration settles.")

logger = get_logger()


def load_event(event_path: Path) -> dict[str, typ.Any]:
    """Load and parse a webhook payload."""
    try:
        event = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read event payload {event_path}: {e}") from e

    if not isinstance(event, dict):
        raise ConfigurationError(f"Event payload {event_path} is not a JSON object")
    return event


async def run(event: dict[str, typ.Any], settings: Settings) -> None:
    async with MergeMeClient.from_settings(settings) as client:
        await continuous_integration_end(client.transport, event, settings)


@app.default
def main(
    *,
    event_path: typ.Annotated[
        Path,
        Parameter(help="Path to the webhook payload.", env_var="GITHUB_EVENT_PATH"),
    ],
    debug: typ.Annotated[
        bool,
        Parameter(help="Log GraphQL traffic and merge decisions.", env_var="RUNNER_DEBUG"),
    ] = False,
) -> None:
    """Merge the pull requests attached to a finished CI run.

    Raises:
        SystemExit: With code 1 when inputs or the event payload are invalid
    """
    configure_logging(level=logging.DEBUG if debug else logging.INFO)

    try:
        settings = Settings.from_env()
        settings.require_token()
        event = load_event(event_path)
    except ConfigurationError as e:
        logger.error("%s", e.message)
        raise SystemExit(1) from e

    asyncio.run(run(event, settings))


if __name__ == "__main__":
    app()
