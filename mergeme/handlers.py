"""
Event handlers invoked when continuous integration finishes.

Supports ``check_suite`` and ``workflow_run`` payloads; each pull request
attached to the event is looked up and handed to ``try_merge``.
"""

import asyncio
from typing import Any

from mergeme.clients.pulls import PullsClient
from mergeme.config import Settings
from mergeme.exceptions import MergeMeError
from mergeme.logging import get_logger
from mergeme.merge import Sleep, try_merge
from mergeme.presets import make_title_checker
from mergeme.types.executor import QueryExecutor
from mergeme.types.pulls import MergeOutcome

logger = get_logger()

SUPPORTED_EVENTS = ("check_suite", "workflow_run")


def extract_pull_request_numbers(event: dict[str, Any]) -> list[int]:
    """Return the numbers of the pull requests attached to a CI event."""
    for key in SUPPORTED_EVENTS:
        run = event.get(key)
        if isinstance(run, dict):
            return [
                pull_request["number"]
                for pull_request in run.get("pull_requests") or []
                if isinstance(pull_request, dict) and "number" in pull_request
            ]
    return []


def extract_repository(event: dict[str, Any]) -> tuple[str, str] | None:
    repository = event.get("repository")
    if not isinstance(repository, dict):
        return None
    owner = (repository.get("owner") or {}).get("login")
    name = repository.get("name")
    if not owner or not name:
        return None
    return owner, name


async def continuous_integration_end(
    executor: QueryExecutor,
    event: dict[str, Any],
    settings: Settings,
    *,
    sleep: Sleep = asyncio.sleep,
) -> list[MergeOutcome | None]:
    """
    Try to merge every pull request a finished CI run belongs to.

    Args:
        executor: Runs queries and mutations
        event: Parsed webhook payload
        settings: Resolved action inputs
        sleep: Awaitable delay used between merge retries

    Returns:
        One entry per pull request handed to ``try_merge``
    """
    if not any(isinstance(event.get(key), dict) for key in SUPPORTED_EVENTS):
        logger.warning(
            "Unsupported event payload; expected one of: %s.", ", ".join(SUPPORTED_EVENTS)
        )
        return []

    repository = extract_repository(event)
    if repository is None:
        logger.warning("Event payload does not identify a repository.")
        return []
    owner, name = repository

    numbers = extract_pull_request_numbers(event)
    if not numbers:
        logger.info("No pull requests are associated with this run.")
        return []

    pulls = PullsClient(executor)
    title_checker = make_title_checker(settings.preset)
    outcomes: list[MergeOutcome | None] = []

    for number in numbers:
        try:
            snapshot = await pulls.get_snapshot(owner, name, number)
        except MergeMeError as e:
            logger.warning("Could not fetch pull request #%d: %s", number, e)
            continue

        if snapshot.pull_request_author_login != settings.allowed_author_login:
            logger.info(
                "Pull request #%d created by %s, not %s, skipping.",
                number,
                snapshot.pull_request_author_login,
                settings.allowed_author_login,
            )
            continue

        outcomes.append(
            await try_merge(
                executor,
                settings.maximum_retries,
                snapshot,
                settings=settings,
                title_checker=title_checker,
                sleep=sleep,
            )
        )

    return outcomes
