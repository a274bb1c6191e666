"""
Pytest plugin for mergeme testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["mergeme.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from mergeme.testing.fixtures import (
    default_settings,
    mock_executor,
    recording_sleep,
    sample_review_edge,
    sample_snapshot,
)

__all__ = [
    "mock_executor",
    "recording_sleep",
    "sample_snapshot",
    "sample_review_edge",
    "default_settings",
]
