"""Pull request data models.

All models are read-only projections of GitHub state, fetched once per
invocation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MergeMethod(str, Enum):
    """Merge strategy passed to the merge mutation."""

    MERGE = "MERGE"
    SQUASH = "SQUASH"
    REBASE = "REBASE"


@dataclass(frozen=True)
class ReviewEdge:
    """A single review recorded on a pull request."""

    state: str  # "APPROVED", "CHANGES_REQUESTED", "COMMENTED", ...


@dataclass(frozen=True)
class CommitSignature:
    """Signature attached to a commit."""

    is_valid: bool


@dataclass(frozen=True)
class CommitNode:
    """One commit on a pull request."""

    author_login: str | None
    signature: CommitSignature | None


@dataclass(frozen=True)
class PullRequestSnapshot:
    """Pull request state at the end of a CI run."""

    pull_request_id: str
    pull_request_number: int
    pull_request_title: str
    pull_request_state: str  # "OPEN", "CLOSED", "MERGED"
    mergeable_state: str  # "MERGEABLE", "CONFLICTING", "UNKNOWN"
    merge_state_status: str | None  # "CLEAN", "DIRTY", "BLOCKED", "UNSTABLE", ...
    merged: bool
    commit_message_headline: str
    review_edges: tuple[ReviewEdge, ...]
    repository_owner: str
    repository_name: str
    pull_request_author_login: str | None = None


@dataclass(frozen=True)
class PullRequestDetails:
    """Payload of a merge attempt, unchanged across retries."""

    commit_headline: str
    pull_request_id: str
    review_edge: ReviewEdge | None


@dataclass
class RetryState:
    """Progress of the merge retry loop."""

    retry_count: int
    maximum_retries: int

    @property
    def exhausted(self) -> bool:
        return self.retry_count > self.maximum_retries


@dataclass(frozen=True)
class MergeOutcome:
    """Terminal state of a merge attempt sequence."""

    merged: bool
    attempts: int
    error: str | None = None


def _login(actor: Any) -> str | None:
    if not isinstance(actor, dict):
        return None
    login = actor.get("login")
    return login if isinstance(login, str) else None


def parse_commit_node(node: dict[str, Any]) -> CommitNode:
    """Parse a ``commits.nodes[]`` entry.

    A missing author, or an author that GitHub could not link to a user,
    produces ``author_login=None``.
    """
    commit = node.get("commit") or {}
    author = commit.get("author") or {}
    signature_data = commit.get("signature")

    signature = None
    if isinstance(signature_data, dict):
        signature = CommitSignature(is_valid=signature_data.get("isValid") is True)

    return CommitNode(author_login=_login(author.get("user")), signature=signature)


def parse_pull_request_snapshot(
    data: dict[str, Any],
    repository_owner: str,
    repository_name: str,
) -> PullRequestSnapshot:
    """Parse a ``repository.pullRequest`` object into a snapshot."""
    commit_nodes = (data.get("commits") or {}).get("edges") or []
    headline = ""
    if commit_nodes:
        headline = commit_nodes[0]["node"]["commit"]["messageHeadline"]

    review_edges = tuple(
        ReviewEdge(state=edge["node"]["state"])
        for edge in (data.get("reviews") or {}).get("edges") or []
    )

    return PullRequestSnapshot(
        pull_request_id=data["id"],
        pull_request_number=data["number"],
        pull_request_title=data["title"],
        pull_request_state=data["state"],
        mergeable_state=data["mergeable"],
        merge_state_status=data.get("mergeStateStatus"),
        merged=data.get("merged", False),
        commit_message_headline=headline,
        review_edges=review_edges,
        repository_owner=repository_owner,
        repository_name=repository_name,
        pull_request_author_login=_login(data.get("author")),
    )
