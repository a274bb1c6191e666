"""Pull requests resource client."""

from typing import TYPE_CHECKING

from mergeme.exceptions import NotFoundError, ServerError
from mergeme.graphql.queries import find_pull_request_info_by_number
from mergeme.modification import iter_pull_request_commits
from mergeme.pagination import GraphQLIterator
from mergeme.types.pulls import (
    CommitNode,
    PullRequestSnapshot,
    parse_pull_request_snapshot,
)

if TYPE_CHECKING:
    from mergeme.types.executor import QueryExecutor


class PullsClient:
    """Client for pull request lookups."""

    def __init__(self, executor: "QueryExecutor") -> None:
        """
        Initialize the pulls client.

        Args:
            executor: Runs the GraphQL queries (usually an AsyncGraphQLTransport)
        """
        self.executor = executor

    async def get_snapshot(
        self,
        repository_owner: str,
        repository_name: str,
        pull_request_number: int,
    ) -> PullRequestSnapshot:
        """
        Fetch the state of a pull request.

        Args:
            repository_owner: Repository owner login
            repository_name: Repository name
            pull_request_number: Pull request number

        Returns:
            PullRequestSnapshot with mergeability, reviews and latest commit headline

        Raises:
            NotFoundError: If the repository or pull request does not exist
            ServerError: If the pull request object lacks an expected field
        """
        data = await self.executor.execute(
            find_pull_request_info_by_number,
            {
                "pullRequestNumber": pull_request_number,
                "repositoryName": repository_name,
                "repositoryOwner": repository_owner,
            },
        )

        pull_request = (data.get("repository") or {}).get("pullRequest")
        if pull_request is None:
            raise NotFoundError(
                "NOT_FOUND",
                f"Pull request {repository_owner}/{repository_name}#{pull_request_number} was not found.",
            )

        try:
            return parse_pull_request_snapshot(pull_request, repository_owner, repository_name)
        except (KeyError, TypeError) as e:
            raise ServerError(
                "INVALID_RESPONSE",
                f"Pull request {repository_owner}/{repository_name}#{pull_request_number} "
                f"is missing field {e}",
            ) from e

    def iter_commits(
        self,
        repository_owner: str,
        repository_name: str,
        pull_request_number: int,
    ) -> GraphQLIterator[CommitNode]:
        """Lazily iterate over the commits of a pull request."""
        return iter_pull_request_commits(
            self.executor,
            pull_request_number=pull_request_number,
            repository_name=repository_name,
            repository_owner=repository_owner,
        )
