"""
Pytest fixtures and response builders for mergeme tests.

The builders produce GraphQL-shaped dictionaries so that parsing code runs
against the same structures the API returns.
"""

from dataclasses import replace
from typing import Any, Generator

import pytest

from mergeme.config import Settings
from mergeme.testing.mock import MockQueryExecutor, RecordingSleep
from mergeme.types.pulls import MergeMethod, PullRequestSnapshot, ReviewEdge


# ============================================================================
# Builders
# ============================================================================


def create_mock_snapshot(**overrides: Any) -> PullRequestSnapshot:
    """Create an eligible snapshot, overriding any field by keyword."""
    snapshot = PullRequestSnapshot(
        pull_request_id="PR_kwDOAAAAAc4AAAAB",
        pull_request_number=42,
        pull_request_title="Bump lodash from 4.17.19 to 4.17.21",
        pull_request_state="OPEN",
        mergeable_state="MERGEABLE",
        merge_state_status="CLEAN",
        merged=False,
        commit_message_headline="Bump lodash from 4.17.19 to 4.17.21",
        review_edges=(),
        repository_owner="octo-org",
        repository_name="octo-repo",
        pull_request_author_login="dependabot",
    )
    return replace(snapshot, **overrides)


def create_commit_node_data(
    login: str | None = "dependabot",
    is_valid: bool | None = True,
) -> dict[str, Any]:
    """
    Create a ``commits.nodes[]`` entry.

    Args:
        login: Author login; None produces a commit whose author is not linked to a user
        is_valid: Signature validity; None produces an unsigned commit
    """
    user = {"login": login} if login is not None else None
    signature = {"isValid": is_valid} if is_valid is not None else None
    return {"commit": {"author": {"user": user}, "signature": signature}}


def commits_page(
    nodes: list[dict[str, Any]],
    has_next_page: bool = False,
    end_cursor: str | None = None,
) -> dict[str, Any]:
    """Wrap commit nodes into a connection page."""
    return {
        "nodes": nodes,
        "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
    }


def commits_response(page: dict[str, Any] | None) -> dict[str, Any]:
    """Wrap a commits page into a FindPullRequestCommits response."""
    if page is None:
        return {"repository": {"pullRequest": None}}
    return {"repository": {"pullRequest": {"commits": page}}}


def paged_commits_responses(
    pages: list[list[dict[str, Any]]],
) -> list[dict[str, Any]]:
    """Build consecutive responses, chaining cursors between pages."""
    responses = []
    for index, nodes in enumerate(pages):
        has_next_page = index < len(pages) - 1
        responses.append(
            commits_response(
                commits_page(
                    nodes,
                    has_next_page=has_next_page,
                    end_cursor=f"cursor-{index + 1}",
                )
            )
        )
    return responses


def pull_request_info_response(
    snapshot: PullRequestSnapshot | None = None,
) -> dict[str, Any]:
    """Build a FindPullRequestInfoByNumber response mirroring a snapshot."""
    if snapshot is None:
        return {"repository": {"pullRequest": None}}

    author = (
        {"login": snapshot.pull_request_author_login}
        if snapshot.pull_request_author_login is not None
        else None
    )
    return {
        "repository": {
            "pullRequest": {
                "author": author,
                "commits": {
                    "edges": [
                        {
                            "node": {
                                "commit": {
                                    "messageHeadline": snapshot.commit_message_headline
                                }
                            }
                        }
                    ]
                },
                "id": snapshot.pull_request_id,
                "mergeable": snapshot.mergeable_state,
                "mergeStateStatus": snapshot.merge_state_status,
                "merged": snapshot.merged,
                "number": snapshot.pull_request_number,
                "reviews": {
                    "edges": [{"node": {"state": edge.state}} for edge in snapshot.review_edges]
                },
                "state": snapshot.pull_request_state,
                "title": snapshot.pull_request_title,
            }
        }
    }


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_executor() -> Generator[MockQueryExecutor, None, None]:
    """Provide a MockQueryExecutor, reset after the test."""
    executor = MockQueryExecutor()
    yield executor
    executor.reset()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Provide a sleep replacement that records requested delays."""
    return RecordingSleep()


@pytest.fixture
def sample_snapshot() -> PullRequestSnapshot:
    """Provide an eligible pull request snapshot."""
    return create_mock_snapshot()


@pytest.fixture
def sample_review_edge() -> ReviewEdge:
    """Provide an approving review."""
    return ReviewEdge(state="APPROVED")


@pytest.fixture
def default_settings() -> Settings:
    """Provide settings matching the action defaults."""
    return Settings(
        github_token="test-token",
        allowed_author_login="dependabot",
        enabled_for_manual_changes=False,
        merge_method=MergeMethod.SQUASH,
        preset=None,
        maximum_retries=3,
    )
