"""
Action configuration.

Inputs are read once from the environment the way GitHub Actions exposes
them: ``INPUT_<NAME>`` with the name upper-cased and spaces replaced by
underscores.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from mergeme.exceptions import ConfigurationError
from mergeme.logging import get_logger
from mergeme.presets import MergePreset
from mergeme.types.pulls import MergeMethod

logger = get_logger()

DEFAULT_GITHUB_LOGIN = "dependabot"
DEFAULT_MAXIMUM_RETRIES = 3
DEFAULT_MERGE_METHOD = MergeMethod.SQUASH


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Read an action input, returning an empty string when unset."""
    env = os.environ if environ is None else environ
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return env.get(key, "").strip()


def parse_merge_method(value: str) -> MergeMethod:
    """Parse MERGE_METHOD, falling back to SQUASH for empty or unknown values."""
    if not value:
        return DEFAULT_MERGE_METHOD

    try:
        return MergeMethod(value.upper())
    except ValueError:
        allowed = ", ".join(method.value for method in MergeMethod)
        logger.warning(
            "Unknown merge method %r, using %s. Allowed: %s.",
            value,
            DEFAULT_MERGE_METHOD.value,
            allowed,
        )
        return DEFAULT_MERGE_METHOD


def parse_merge_preset(value: str) -> MergePreset | None:
    """Parse PRESET; empty or unknown values disable the preset."""
    if not value:
        return None

    try:
        return MergePreset(value.upper())
    except ValueError:
        logger.warning("Unknown merge preset %r, ignoring it.", value)
        return None


def parse_maximum_retries(value: str) -> int:
    if not value:
        return DEFAULT_MAXIMUM_RETRIES

    try:
        retries = int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"MAXIMUM_RETRIES must be an integer, got {value!r}"
        ) from e

    if retries < 0:
        raise ConfigurationError(
            f"MAXIMUM_RETRIES must not be negative, got {retries}"
        )
    return retries


@dataclass(frozen=True)
class Settings:
    """Resolved action inputs."""

    github_token: str | None = None
    allowed_author_login: str = DEFAULT_GITHUB_LOGIN
    enabled_for_manual_changes: bool = False
    merge_method: MergeMethod = DEFAULT_MERGE_METHOD
    preset: MergePreset | None = None
    maximum_retries: int = DEFAULT_MAXIMUM_RETRIES

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Resolve settings from action inputs.

        Environment variables:
            INPUT_GITHUB_TOKEN: Token used for GraphQL calls
            INPUT_GITHUB_LOGIN: Login whose pull requests may be merged (default: dependabot)
            INPUT_ENABLED_FOR_MANUAL_CHANGES: "true" to skip the modification check
            INPUT_MERGE_METHOD: MERGE, SQUASH or REBASE (default: SQUASH)
            INPUT_PRESET: DEPENDABOT_MINOR or DEPENDABOT_PATCH (optional)
            INPUT_MAXIMUM_RETRIES: Retries on "Base branch was modified." (default: 3)

        Raises:
            ConfigurationError: If MAXIMUM_RETRIES is not a non-negative integer
        """
        return cls(
            github_token=get_input("GITHUB_TOKEN", environ) or None,
            allowed_author_login=get_input("GITHUB_LOGIN", environ) or DEFAULT_GITHUB_LOGIN,
            enabled_for_manual_changes=get_input("ENABLED_FOR_MANUAL_CHANGES", environ) == "true",
            merge_method=parse_merge_method(get_input("MERGE_METHOD", environ)),
            preset=parse_merge_preset(get_input("PRESET", environ)),
            maximum_retries=parse_maximum_retries(get_input("MAXIMUM_RETRIES", environ)),
        )

    def require_token(self) -> str:
        """Return the token or raise if it was not provided."""
        if not self.github_token:
            raise ConfigurationError("INPUT_GITHUB_TOKEN environment variable not set")
        return self.github_token
