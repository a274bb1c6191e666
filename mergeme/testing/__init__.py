"""mergeme testing utilities.

Provides a mock query executor and response builders for testing code that
drives the merge engine.
"""

from mergeme.testing.fixtures import (
    commits_page,
    commits_response,
    create_commit_node_data,
    create_mock_snapshot,
    paged_commits_responses,
    pull_request_info_response,
)
from mergeme.testing.mock import (
    MockCall,
    MockQueryExecutor,
    MockResponse,
    RecordingSleep,
    operation_name,
)

__all__ = [
    # Mock executor
    "MockQueryExecutor",
    "MockCall",
    "MockResponse",
    "RecordingSleep",
    "operation_name",
    # Builders
    "create_mock_snapshot",
    "create_commit_node_data",
    "commits_page",
    "commits_response",
    "paged_commits_responses",
    "pull_request_info_response",
]
