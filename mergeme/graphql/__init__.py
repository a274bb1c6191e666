"""GraphQL documents sent to the GitHub API."""

from mergeme.graphql.mutations import (
    approve_and_merge_pull_request_mutation,
    merge_pull_request_mutation,
)
from mergeme.graphql.queries import (
    find_pull_request_commits,
    find_pull_request_info_by_number,
)

__all__ = [
    "find_pull_request_commits",
    "find_pull_request_info_by_number",
    "approve_and_merge_pull_request_mutation",
    "merge_pull_request_mutation",
]
