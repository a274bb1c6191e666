"""mergeme type definitions.

This module exports all data model types used by the package.
"""

from mergeme.types.executor import QueryExecutor
from mergeme.types.pulls import (
    CommitNode,
    CommitSignature,
    MergeMethod,
    MergeOutcome,
    PullRequestDetails,
    PullRequestSnapshot,
    RetryState,
    ReviewEdge,
    parse_commit_node,
    parse_pull_request_snapshot,
)

__all__ = [
    # Collaborators
    "QueryExecutor",
    # Pull request state
    "PullRequestSnapshot",
    "ReviewEdge",
    "CommitNode",
    "CommitSignature",
    # Merge engine
    "MergeMethod",
    "PullRequestDetails",
    "RetryState",
    "MergeOutcome",
    # Parsers
    "parse_commit_node",
    "parse_pull_request_snapshot",
]
