"""Shared fixtures for the mergeme test suite."""

from mergeme.testing.conftest import (  # noqa: F401
    default_settings,
    mock_executor,
    recording_sleep,
    sample_review_edge,
    sample_snapshot,
)
