"""
mergeme logging utilities.

Three loggers are used across the package:

- ``mergeme``: package root, also used by the event handler and CLI
- ``mergeme.http``: one DEBUG line per GraphQL request and response
- ``mergeme.merge``: gate decisions, commit warnings and merge retries

Tokens and authorization values are redacted before anything reaches a
handler.
"""

import logging
import re
from typing import Any

_root_logger = logging.getLogger("mergeme")
_http_logger = logging.getLogger("mergeme.http")
_merge_logger = logging.getLogger("mergeme.merge")

_REDACTED = "[REDACTED]"

_SENSITIVE_PATTERNS = [
    # Authorization: Bearer <value> / token <value>
    (re.compile(r"\b(bearer|token)\s+[A-Za-z0-9_\-\.]{8,}", re.IGNORECASE), rf"\1 {_REDACTED}"),
    # ghp_, gho_, ghu_, ghs_ and ghr_ tokens
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    # Fine-grained personal access tokens
    (re.compile(r"\bgithub_pat_\w{20,}\b"), "[TOKEN_REDACTED]"),
    # key: "value" and key="value" assignments
    (
        re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE),
        rf"\1: {_REDACTED}",
    ),
]

_DEFAULT_SENSITIVE_KEYS = frozenset({"authorization", "token", "secret", "password", "api_key"})

_QUERY_PREVIEW_LENGTH = 80

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    merge_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Attach a handler to the ``mergeme`` logger and set package log levels.

    Args:
        level: Level of the package root logger (default: INFO)
        http_level: Level of ``mergeme.http`` (default: ``level``)
        merge_level: Level of ``mergeme.merge`` (default: ``level``)
        handler: Destination (default: StreamHandler on stderr)
        format_string: Record format (default: time, level, logger, message)

    Example:
        ```python
        import logging
        from mergeme.logging import configure_logging

        # Trace every GraphQL round-trip, keep merge decisions at INFO
        configure_logging(http_level=logging.DEBUG)
        ```
    """
    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))

    _root_logger.addHandler(handler)
    _root_logger.setLevel(level)

    for logger, override in ((_http_logger, http_level), (_merge_logger, merge_level)):
        logger.setLevel(level if override is None else override)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a mergeme logger.

    Args:
        name: Suffix below ``mergeme`` (e.g. "http", "merge"); None for the root

    Returns:
        Logger instance
    """
    return _root_logger if name is None else _root_logger.getChild(name)


def mask_sensitive_data(text: str) -> str:
    """Replace tokens and credentials in ``text`` with redaction markers."""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _is_sensitive(key: str, sensitive_keys: frozenset[str] | set[str]) -> bool:
    key = key.lower()
    return any(sensitive in key for sensitive in sensitive_keys)


def _redact(value: Any, sensitive_keys: frozenset[str] | set[str]) -> Any:
    if isinstance(value, dict):
        return {
            key: _REDACTED if _is_sensitive(key, sensitive_keys) else _redact(item, sensitive_keys)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_redact(item, sensitive_keys) for item in value]
    return value


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Copy a dictionary for logging, redacting sensitive values at any depth.

    Args:
        data: Dictionary that may hold credentials (variables, headers, bodies)
        sensitive_keys: Key fragments to redact (default: authorization, token,
            secret, password, api_key)

    Returns:
        Copy of ``data`` where every matching key maps to "[REDACTED]"
    """
    return _redact(data, sensitive_keys or _DEFAULT_SENSITIVE_KEYS)


def _query_preview(query: str) -> str:
    collapsed = " ".join(query.split())
    if len(collapsed) <= _QUERY_PREVIEW_LENGTH:
        return collapsed
    return f"{collapsed[:_QUERY_PREVIEW_LENGTH]}..."


def _debug_http(parts: list[str]) -> None:
    _http_logger.debug(mask_sensitive_data(" | ".join(parts)))


def log_graphql_request(
    url: str,
    query: str,
    variables: dict[str, Any] | None = None,
) -> None:
    """
    Log an outgoing GraphQL document at DEBUG level.

    The document is collapsed to one line and shortened; variables are
    redacted with ``safe_log_dict``.
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    parts = [f"POST {url}", f"query={_query_preview(query)}"]
    if variables:
        parts.append(f"variables={safe_log_dict(variables)}")
    _debug_http(parts)


def log_graphql_response(
    status_code: int,
    url: str,
    body: dict[str, Any] | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log a GraphQL response at DEBUG level.

    Args:
        status_code: HTTP status code
        url: Endpoint URL
        body: Decoded response body, if any
        elapsed_ms: Round-trip time in milliseconds, if measured
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    parts = [f"Response {status_code} from {url}"]
    if elapsed_ms is not None:
        parts.append(f"elapsed={elapsed_ms:.2f}ms")
    if body:
        parts.append(f"body={safe_log_dict(body)}")
    _debug_http(parts)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_graphql_request",
    "log_graphql_response",
]
