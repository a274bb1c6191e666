"""
Eligibility gate deciding whether a pull request may be merged.

Preconditions are checked in a fixed order and the first failing one
decides; later checks, including the network-bound modification check,
are not evaluated.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from mergeme.types.pulls import PullRequestSnapshot


@dataclass(frozen=True)
class Decision:
    """Outcome of the eligibility gate."""

    status: str  # "ready" or "skipped"
    reason: str

    @property
    def ready(self) -> bool:
        return self.status == "ready"


def _skip(reason: str) -> Decision:
    return Decision(status="skipped", reason=reason)


async def evaluate_eligibility(
    snapshot: PullRequestSnapshot,
    *,
    enabled_for_manual_changes: bool,
    allowed_author_login: str,
    title_checker: Callable[[str], bool],
    modification_check: Callable[[], Awaitable[bool]],
) -> Decision:
    """
    Evaluate the merge preconditions against a snapshot.

    Args:
        snapshot: Pull request state
        enabled_for_manual_changes: Skip the modification check when True
        allowed_author_login: Login named in the skip reason of the modification check
        title_checker: Decides whether the title's version bump is allowed
        modification_check: Returns True if the pull request was modified

    Returns:
        A ready Decision, or a skipped one carrying the first failing reason
    """
    if snapshot.mergeable_state != "MERGEABLE":
        return _skip(
            f"Pull request is not in a mergeable state: {snapshot.mergeable_state}."
        )

    if snapshot.merged:
        return _skip("Pull request is already merged.")

    # Not every API response populates mergeStateStatus; absence does not block.
    if (
        snapshot.merge_state_status is not None
        and snapshot.merge_state_status != "CLEAN"
    ):
        return _skip(
            "Pull request cannot be merged cleanly. "
            f"Current state: {snapshot.merge_state_status}."
        )

    if snapshot.pull_request_state != "OPEN":
        return _skip(f"Pull request is not open: {snapshot.pull_request_state}.")

    if not title_checker(snapshot.pull_request_title):
        return _skip("Pull request version bump is not allowed by PRESET.")

    if not enabled_for_manual_changes and await modification_check():
        return _skip(f"Pull request changes were not made by {allowed_author_login}.")

    return Decision(status="ready", reason="eligible")
