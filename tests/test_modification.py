"""
Tests for detecting pull requests modified by someone other than their author.
"""

import asyncio

import pytest

from mergeme.exceptions import PageShapeError
from mergeme.modification import is_modified
from mergeme.testing import (
    MockQueryExecutor,
    commits_response,
    create_commit_node_data,
    paged_commits_responses,
)

COMMITS = "FindPullRequestCommits"


def executor_with_pages(pages: list[list[dict]]) -> MockQueryExecutor:
    executor = MockQueryExecutor()
    for response in paged_commits_responses(pages):
        executor.configure(COMMITS, data=response)
    return executor


def check(executor: MockQueryExecutor) -> bool:
    return asyncio.run(
        is_modified(
            executor,
            pull_request_number=42,
            repository_name="octo-repo",
            repository_owner="octo-org",
        )
    )


def test_single_signed_commit_is_not_modified() -> None:
    executor = executor_with_pages([[create_commit_node_data("dependabot")]])

    assert check(executor) is False


def test_same_author_across_pages_is_not_modified() -> None:
    executor = executor_with_pages(
        [
            [create_commit_node_data("dependabot"), create_commit_node_data("dependabot")],
            [create_commit_node_data("dependabot")],
        ]
    )

    assert check(executor) is False
    assert executor.call_count(COMMITS) == 2


def test_different_second_author_short_circuits() -> None:
    """A foreign second commit is decisive; the third page is never fetched."""
    executor = executor_with_pages(
        [
            [create_commit_node_data("dependabot")],
            [create_commit_node_data("mallory")],
            [create_commit_node_data("dependabot")],
        ]
    )

    assert check(executor) is True
    assert executor.call_count(COMMITS) == 2


def test_first_commit_without_signature_is_modified() -> None:
    executor = executor_with_pages([[create_commit_node_data("dependabot", is_valid=None)]])

    assert check(executor) is True


def test_invalid_signature_is_modified() -> None:
    executor = executor_with_pages(
        [
            [
                create_commit_node_data("dependabot"),
                create_commit_node_data("dependabot", is_valid=False),
            ]
        ]
    )

    assert check(executor) is True


def test_invalid_signature_stops_before_next_page() -> None:
    executor = executor_with_pages(
        [
            [create_commit_node_data("dependabot", is_valid=False)],
            [create_commit_node_data("dependabot")],
        ]
    )

    assert check(executor) is True
    assert executor.call_count(COMMITS) == 1


def test_no_commits_is_treated_as_modified() -> None:
    executor = executor_with_pages([[]])

    assert check(executor) is True


def test_commit_without_linked_user_is_modified() -> None:
    executor = executor_with_pages(
        [[create_commit_node_data("dependabot"), create_commit_node_data(None)]]
    )

    assert check(executor) is True


def test_first_commit_without_linked_user_is_modified() -> None:
    executor = executor_with_pages([[create_commit_node_data(None)]])

    assert check(executor) is True


def test_missing_author_object_does_not_crash() -> None:
    executor = MockQueryExecutor()
    executor.configure(
        COMMITS,
        data=commits_response(
            {
                "nodes": [{"commit": {"author": None, "signature": {"isValid": True}}}],
                "pageInfo": {"hasNextPage": False, "endCursor": None},
            }
        ),
    )

    assert check(executor) is True


def test_deleted_pull_request_propagates_page_shape_error() -> None:
    executor = MockQueryExecutor()
    executor.configure(COMMITS, data=commits_response(None))

    with pytest.raises(PageShapeError):
        check(executor)


def test_query_variables_identify_the_pull_request() -> None:
    executor = executor_with_pages([[create_commit_node_data("dependabot")]])

    check(executor)

    variables = executor.get_calls(COMMITS)[0].variables
    assert variables["pullRequestNumber"] == 42
    assert variables["repositoryName"] == "octo-repo"
    assert variables["repositoryOwner"] == "octo-org"
    assert variables["cursor"] is None
