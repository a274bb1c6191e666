"""
Tests for the CI-finished event handler.
"""

import asyncio
import logging
from typing import Any

import pytest

from mergeme.config import Settings
from mergeme.exceptions import ServerError
from mergeme.handlers import (
    continuous_integration_end,
    extract_pull_request_numbers,
    extract_repository,
)
from mergeme.testing import (
    MockQueryExecutor,
    RecordingSleep,
    create_commit_node_data,
    create_mock_snapshot,
    paged_commits_responses,
    pull_request_info_response,
)

PR_INFO = "FindPullRequestInfoByNumber"
COMMITS = "FindPullRequestCommits"
APPROVE_AND_MERGE = "ApproveAndMergePullRequest"


def ci_event(kind: str = "check_suite", numbers: tuple[int, ...] = (42,)) -> dict[str, Any]:
    return {
        "action": "completed",
        kind: {
            "conclusion": "success",
            "pull_requests": [{"number": number} for number in numbers],
        },
        "repository": {"name": "octo-repo", "owner": {"login": "octo-org"}},
    }


def eligible_executor() -> MockQueryExecutor:
    executor = MockQueryExecutor()
    executor.configure(PR_INFO, data=pull_request_info_response(create_mock_snapshot()))
    for response in paged_commits_responses([[create_commit_node_data("dependabot")]]):
        executor.configure(COMMITS, data=response)
    return executor


def handle(
    executor: MockQueryExecutor, event: dict[str, Any], settings: Settings
) -> list:
    return asyncio.run(
        continuous_integration_end(executor, event, settings, sleep=RecordingSleep())
    )


@pytest.mark.parametrize("kind", ["check_suite", "workflow_run"])
def test_eligible_pull_request_is_merged(kind: str, default_settings: Settings) -> None:
    executor = eligible_executor()

    outcomes = handle(executor, ci_event(kind), default_settings)

    assert len(outcomes) == 1
    assert outcomes[0] is not None and outcomes[0].merged
    assert executor.get_calls(PR_INFO)[0].variables == {
        "pullRequestNumber": 42,
        "repositoryName": "octo-repo",
        "repositoryOwner": "octo-org",
    }
    assert executor.call_count(APPROVE_AND_MERGE) == 1


def test_pull_request_from_other_author_is_skipped(
    default_settings: Settings, caplog: pytest.LogCaptureFixture
) -> None:
    executor = MockQueryExecutor()
    executor.configure(
        PR_INFO,
        data=pull_request_info_response(
            create_mock_snapshot(pull_request_author_login="octocat")
        ),
    )

    with caplog.at_level(logging.INFO, logger="mergeme"):
        outcomes = handle(executor, ci_event(), default_settings)

    assert outcomes == []
    assert "created by octocat, not dependabot" in caplog.text
    assert not executor.was_called(COMMITS)


def test_unsupported_event_is_ignored(default_settings: Settings) -> None:
    executor = MockQueryExecutor()

    outcomes = handle(executor, {"pull_request": {"number": 1}}, default_settings)

    assert outcomes == []
    assert executor.call_count() == 0


def test_event_without_pull_requests(default_settings: Settings) -> None:
    executor = MockQueryExecutor()

    outcomes = handle(executor, ci_event(numbers=()), default_settings)

    assert outcomes == []
    assert executor.call_count() == 0


def test_missing_pull_request_is_skipped(
    default_settings: Settings, caplog: pytest.LogCaptureFixture
) -> None:
    executor = MockQueryExecutor()
    executor.configure(PR_INFO, data=pull_request_info_response(None))

    with caplog.at_level(logging.WARNING, logger="mergeme"):
        outcomes = handle(executor, ci_event(), default_settings)

    assert outcomes == []
    assert "Could not fetch pull request #42" in caplog.text


def test_lookup_failure_does_not_stop_other_pull_requests(
    default_settings: Settings,
) -> None:
    responses = iter(
        [
            ServerError("HTTP_502", "Bad gateway"),
            pull_request_info_response(create_mock_snapshot(pull_request_number=43)),
        ]
    )

    def handler(query: str, variables: dict[str, Any]) -> dict[str, Any]:
        if "FindPullRequestInfoByNumber" in query:
            response = next(responses)
            if isinstance(response, Exception):
                raise response
            return response
        if "FindPullRequestCommits" in query:
            return paged_commits_responses([[create_commit_node_data("dependabot")]])[0]
        return {}

    executor = MockQueryExecutor(handler=handler)

    outcomes = handle(executor, ci_event(numbers=(42, 43)), default_settings)

    assert len(outcomes) == 1
    assert outcomes[0] is not None and outcomes[0].merged


def test_preset_from_settings_is_applied() -> None:
    executor = MockQueryExecutor()
    executor.configure(
        PR_INFO,
        data=pull_request_info_response(
            create_mock_snapshot(pull_request_title="Bump lodash from 4.17.21 to 4.18.0")
        ),
    )
    settings = Settings.from_env({"INPUT_PRESET": "DEPENDABOT_PATCH"})

    outcomes = handle(executor, ci_event(), settings)

    assert outcomes == [None]
    assert not executor.was_called(COMMITS)
    assert not executor.was_called(APPROVE_AND_MERGE)


def test_extract_pull_request_numbers() -> None:
    assert extract_pull_request_numbers(ci_event("workflow_run", (1, 2))) == [1, 2]
    assert extract_pull_request_numbers({"check_suite": {"pull_requests": None}}) == []
    assert extract_pull_request_numbers({}) == []


def test_extract_repository() -> None:
    assert extract_repository(ci_event()) == ("octo-org", "octo-repo")
    assert extract_repository({"repository": {"name": "x"}}) is None
    assert extract_repository({}) is None


def test_malformed_pull_request_does_not_stop_other_pull_requests(
    default_settings: Settings, caplog: pytest.LogCaptureFixture
) -> None:
    malformed = pull_request_info_response(create_mock_snapshot(pull_request_number=1))
    del malformed["repository"]["pullRequest"]["title"]
    responses = iter(
        [malformed, pull_request_info_response(create_mock_snapshot(pull_request_number=2))]
    )

    def handler(query: str, variables: dict[str, Any]) -> dict[str, Any]:
        if "FindPullRequestInfoByNumber" in query:
            return next(responses)
        if "FindPullRequestCommits" in query:
            return paged_commits_responses([[create_commit_node_data("dependabot")]])[0]
        return {}

    executor = MockQueryExecutor(handler=handler)

    with caplog.at_level(logging.WARNING, logger="mergeme"):
        outcomes = handle(executor, ci_event(numbers=(1, 2)), default_settings)

    assert len(outcomes) == 1
    assert outcomes[0] is not None and outcomes[0].merged
    assert "Could not fetch pull request #1" in caplog.text
    assert executor.call_count(APPROVE_AND_MERGE) == 1
