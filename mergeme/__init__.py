"""mergeme - merge pull requests once continuous integration settles."""

from mergeme.client import MergeMeClient
from mergeme.config import Settings
from mergeme.eligibility import Decision, evaluate_eligibility
from mergeme.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    GraphQLError,
    MergeMeError,
    NotFoundError,
    PageShapeError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from mergeme.handlers import continuous_integration_end
from mergeme.logging import configure_logging, get_logger
from mergeme.merge import merge_with_retry, try_merge
from mergeme.modification import is_modified
from mergeme.pagination import GraphQLIterator, make_graphql_iterator
from mergeme.presets import MergePreset, check_pull_request_title_for_merge_preset
from mergeme.transport import AsyncGraphQLTransport, RetryConfig
from mergeme.types import (
    CommitNode,
    MergeMethod,
    MergeOutcome,
    PullRequestDetails,
    PullRequestSnapshot,
    QueryExecutor,
    ReviewEdge,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Entry points
    "try_merge",
    "continuous_integration_end",
    # Engine
    "merge_with_retry",
    "evaluate_eligibility",
    "Decision",
    "is_modified",
    "GraphQLIterator",
    "make_graphql_iterator",
    # Presets
    "MergePreset",
    "check_pull_request_title_for_merge_preset",
    # Client
    "MergeMeClient",
    "AsyncGraphQLTransport",
    "RetryConfig",
    "QueryExecutor",
    # Configuration
    "Settings",
    # Types
    "PullRequestSnapshot",
    "PullRequestDetails",
    "ReviewEdge",
    "CommitNode",
    "MergeMethod",
    "MergeOutcome",
    # Exceptions
    "MergeMeError",
    "ConfigurationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "GraphQLError",
    "PageShapeError",
    # Logging
    "configure_logging",
    "get_logger",
]
