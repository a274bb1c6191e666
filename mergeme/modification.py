"""
Detection of pull requests changed by someone other than their author.

A pull request counts as unmodified only when every commit carries a valid
signature and was authored by the same user as the first commit.
"""

from typing import Any

from mergeme.graphql.queries import find_pull_request_commits
from mergeme.logging import get_logger
from mergeme.pagination import GraphQLIterator, make_graphql_iterator
from mergeme.types.executor import QueryExecutor
from mergeme.types.pulls import CommitNode, parse_commit_node

logger = get_logger("merge")

COMMITS_PAGE_SIZE = 100


def _extract_commits(response: dict[str, Any]) -> Any:
    pull_request = (response.get("repository") or {}).get("pullRequest")
    if pull_request is None:
        return None
    return pull_request.get("commits")


def iter_pull_request_commits(
    executor: QueryExecutor,
    *,
    pull_request_number: int,
    repository_name: str,
    repository_owner: str,
    page_size: int = COMMITS_PAGE_SIZE,
) -> GraphQLIterator[CommitNode]:
    """Lazily iterate over the commits of a pull request, oldest first."""
    return make_graphql_iterator(
        executor,
        query=find_pull_request_commits,
        parameters={
            "pageSize": page_size,
            "pullRequestNumber": pull_request_number,
            "repositoryName": repository_name,
            "repositoryOwner": repository_owner,
        },
        extract_list=_extract_commits,
        parse_node=parse_commit_node,
    )


async def is_modified(
    executor: QueryExecutor,
    *,
    pull_request_number: int,
    repository_name: str,
    repository_owner: str,
) -> bool:
    """
    Decide whether a pull request was modified or cannot be trusted.

    Stops fetching pages as soon as one commit disqualifies the pull request.

    Args:
        executor: Runs the commit queries
        pull_request_number: Pull request number
        repository_name: Repository name
        repository_owner: Repository owner login

    Returns:
        True if any commit is unsigned, badly signed or by another author,
        or if the pull request has no commits

    Raises:
        PageShapeError: If the commit list cannot be found in a response
    """
    commits = iter_pull_request_commits(
        executor,
        pull_request_number=pull_request_number,
        repository_name=repository_name,
        repository_owner=repository_owner,
    )

    first_commit: CommitNode | None = None

    async for commit in commits:
        if first_commit is None:
            first_commit = commit

        if commit.signature is None or not commit.signature.is_valid:
            logger.warning(
                "Commit signature not present or invalid, regarding PR as modified."
            )
            return True

        # An unknown author never matches, not even another unknown author.
        if commit.author_login is None or commit.author_login != first_commit.author_login:
            return True

    if first_commit is None:
        logger.warning("Could not find PR commits, aborting.")
        return True

    return False
