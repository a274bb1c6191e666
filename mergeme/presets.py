"""
Merge presets based on the version bump announced in a pull request title.

Dependabot titles look like ``Bump lodash from 4.17.19 to 4.17.21`` or, with
a conventional commit prefix, ``chore(deps): bump lodash from 4.17.19 to
4.17.21 in /frontend``.
"""

import re
from collections.abc import Callable
from enum import Enum

from mergeme.logging import get_logger

logger = get_logger("merge")

_TITLE_RE = re.compile(
    r"bump\s+\S+\s+from\s+(?P<from>\S+)\s+to\s+(?P<to>\S+?)(?:\s+in\s+\S+)?\s*$",
    re.IGNORECASE,
)
_VERSION_RE = re.compile(r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?")


class MergePreset(str, Enum):
    """Which version bumps may be merged automatically."""

    DEPENDABOT_MINOR = "DEPENDABOT_MINOR"
    DEPENDABOT_PATCH = "DEPENDABOT_PATCH"


_ALLOWED_BUMPS = {
    MergePreset.DEPENDABOT_MINOR: {"minor", "patch"},
    MergePreset.DEPENDABOT_PATCH: {"patch"},
}


def _parse_version(value: str) -> tuple[int, int, int] | None:
    match = _VERSION_RE.match(value)
    if match is None:
        return None
    return (
        int(match.group("major")),
        int(match.group("minor") or 0),
        int(match.group("patch") or 0),
    )


def get_version_bump(title: str) -> str | None:
    """
    Classify the bump announced by a pull request title.

    Returns:
        "major", "minor", "patch", or None if the title is not a
        recognizable bump or the versions do not increase
    """
    match = _TITLE_RE.search(title.strip())
    if match is None:
        return None

    from_version = _parse_version(match.group("from"))
    to_version = _parse_version(match.group("to"))
    if from_version is None or to_version is None:
        return None

    for name, old, new in zip(("major", "minor", "patch"), from_version, to_version):
        if new > old:
            return name
        if new < old:
            return None
    return None


def check_pull_request_title_for_merge_preset(
    title: str, preset: MergePreset | None
) -> bool:
    """Return True if the title's version bump is allowed by the preset."""
    if preset is None:
        return True

    bump = get_version_bump(title)
    if bump is None:
        logger.debug("Could not determine version bump from title: %s", title)
        return False

    return bump in _ALLOWED_BUMPS[preset]


def make_title_checker(preset: MergePreset | None) -> Callable[[str], bool]:
    """Bind a preset, producing the title checker used by the eligibility gate."""

    def check(title: str) -> bool:
        return check_pull_request_title_for_merge_preset(title, preset)

    return check
