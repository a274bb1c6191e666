"""
Merge a pull request, retrying while the base branch keeps moving.

GitHub rejects a merge with "Base branch was modified." when the base branch
changes between the merge request and its execution. That error is retried
with exponential backoff; every other failure ends the attempt. Failures are
reported through logging and never raised to the caller.
"""

import asyncio
from collections.abc import Awaitable, Callable

from mergeme.config import Settings
from mergeme.eligibility import evaluate_eligibility
from mergeme.exceptions import MergeMeError
from mergeme.graphql.mutations import (
    approve_and_merge_pull_request_mutation,
    merge_pull_request_mutation,
)
from mergeme.logging import get_logger
from mergeme.modification import is_modified
from mergeme.presets import make_title_checker
from mergeme.types.executor import QueryExecutor
from mergeme.types.pulls import (
    MergeMethod,
    MergeOutcome,
    PullRequestDetails,
    PullRequestSnapshot,
    RetryState,
)

logger = get_logger("merge")

EXPONENTIAL_BACKOFF = 2
MINIMUM_WAIT_TIME = 1000  # milliseconds

BASE_BRANCH_MODIFIED = "Base branch was modified."

Sleep = Callable[[float], Awaitable[None]]


def select_merge_mutation(details: PullRequestDetails, merge_method: MergeMethod) -> str:
    """Approve and merge when nobody reviewed yet, otherwise only merge."""
    if details.review_edge is None:
        return approve_and_merge_pull_request_mutation(merge_method)
    return merge_pull_request_mutation(merge_method)


async def merge(
    executor: QueryExecutor,
    details: PullRequestDetails,
    merge_method: MergeMethod,
) -> None:
    """Run the merge mutation once."""
    mutation = select_merge_mutation(details, merge_method)
    await executor.execute(
        mutation,
        {
            "commitHeadline": details.commit_headline,
            "pullRequestId": details.pull_request_id,
        },
    )


def should_retry(error: Exception, retry_count: int, maximum_retries: int) -> bool:
    is_retryable_error = BASE_BRANCH_MODIFIED in str(error)

    exhausted = RetryState(retry_count=retry_count, maximum_retries=maximum_retries).exhausted
    if is_retryable_error and exhausted:
        logger.info("Unable to merge after %d attempts. Retries exhausted.", retry_count)
        return False

    return is_retryable_error


def backoff_delay(retry_count: int) -> int:
    """Milliseconds to wait before the attempt following ``retry_count``."""
    return retry_count ** EXPONENTIAL_BACKOFF * MINIMUM_WAIT_TIME


async def merge_with_retry(
    executor: QueryExecutor,
    details: PullRequestDetails,
    *,
    maximum_retries: int,
    merge_method: MergeMethod,
    retry_count: int = 1,
    sleep: Sleep = asyncio.sleep,
) -> MergeOutcome:
    """
    Merge the pull request, retrying on "Base branch was modified.".

    Up to ``maximum_retries + 1`` attempts are made. The mutation and its
    payload are the same for every attempt.

    Args:
        executor: Runs the merge mutation
        details: Merge payload
        maximum_retries: Retries allowed after the first attempt
        merge_method: Merge strategy, resolved before the first attempt
        retry_count: Number of the first attempt
        sleep: Awaitable delay taking seconds

    Returns:
        MergeOutcome describing success or the final error
    """
    state = RetryState(retry_count=retry_count, maximum_retries=maximum_retries)
    attempts = 0

    while True:
        attempts += 1
        try:
            await merge(executor, details, merge_method)
        except Exception as error:
            if should_retry(error, state.retry_count, state.maximum_retries):
                next_retry_in = backoff_delay(state.retry_count)
                logger.info("Retrying in %d...", next_retry_in)
                await sleep(next_retry_in / 1000)
                state.retry_count += 1
                continue

            logger.info(
                "An error occurred while merging the Pull Request. This is usually "
                "caused by the base branch being out of sync with the target "
                "branch. In this case, the base branch must be rebased. Some "
                "tools, such as Dependabot, do that automatically."
            )
            logger.debug("Original error: %s.", error)
            return MergeOutcome(merged=False, attempts=attempts, error=str(error))

        logger.info("Pull request merged after %d attempt(s).", attempts)
        return MergeOutcome(merged=True, attempts=attempts)


async def try_merge(
    executor: QueryExecutor,
    maximum_retries: int,
    snapshot: PullRequestSnapshot,
    *,
    settings: Settings | None = None,
    title_checker: Callable[[str], bool] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> MergeOutcome | None:
    """
    Merge a pull request if it passes the eligibility gate.

    Never raises: skips, merge failures and lookup errors are logged.

    Args:
        executor: Runs queries and mutations
        maximum_retries: Retries allowed on "Base branch was modified."
        snapshot: Pull request state at the end of the CI run
        settings: Resolved inputs (default: read from the environment)
        title_checker: Title policy (default: built from ``settings.preset``)
        sleep: Awaitable delay taking seconds

    Returns:
        The merge outcome, or None when the pull request was not eligible
    """
    try:
        if settings is None:
            settings = Settings.from_env()
    except MergeMeError as e:
        logger.error("Invalid configuration: %s", e)
        return None

    merge_method = settings.merge_method
    if title_checker is None:
        title_checker = make_title_checker(settings.preset)

    async def modification_check() -> bool:
        return await is_modified(
            executor,
            pull_request_number=snapshot.pull_request_number,
            repository_name=snapshot.repository_name,
            repository_owner=snapshot.repository_owner,
        )

    try:
        decision = await evaluate_eligibility(
            snapshot,
            enabled_for_manual_changes=settings.enabled_for_manual_changes,
            allowed_author_login=settings.allowed_author_login,
            title_checker=title_checker,
            modification_check=modification_check,
        )
    except Exception as e:
        logger.error(
            "Could not evaluate pull request #%d: %s", snapshot.pull_request_number, e
        )
        return None

    if not decision.ready:
        logger.info(decision.reason)
        return None

    details = PullRequestDetails(
        commit_headline=snapshot.commit_message_headline,
        pull_request_id=snapshot.pull_request_id,
        review_edge=snapshot.review_edges[0] if snapshot.review_edges else None,
    )

    return await merge_with_retry(
        executor,
        details,
        maximum_retries=maximum_retries,
        merge_method=merge_method,
        retry_count=1,
        sleep=sleep,
    )
