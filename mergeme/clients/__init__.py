"""mergeme resource clients."""

from mergeme.clients.pulls import PullsClient

__all__ = [
    "PullsClient",
]
