"""
GraphQL transport for mergeme.

Posts documents to the GitHub GraphQL endpoint over ``httpx``. Transient
HTTP failures (rate limits, 5xx, dropped connections) are retried with
jittered exponential backoff; everything else becomes a typed exception.
"""

import asyncio
import random
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from mergeme.exceptions import (
    AuthenticationError,
    AuthorizationError,
    GraphQLError,
    MergeMeError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from mergeme.logging import log_graphql_request, log_graphql_response

_STATUS_ERRORS: dict[int, type[MergeMeError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
}

_DEFAULT_RETRY_AFTER = 60


@dataclass
class RetryConfig:
    """Configuration for automatic retry of failed HTTP requests."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # seconds
    jitter: float = 0.1  # fraction of the base wait, applied both ways

    def allows(self, attempt: int) -> bool:
        """Whether another request may follow ``attempt`` (0-indexed)."""
        return attempt < self.max_retries

    def should_retry(self, status_code: int, attempt: int) -> bool:
        return self.allows(attempt) and status_code in self.retry_on

    def backoff(self, attempt: int, retry_after: str | None = None) -> float:
        """
        Seconds to wait before the request following ``attempt``.

        A numeric Retry-After value wins when ``respect_retry_after`` is set;
        otherwise ``backoff_factor ** attempt`` with jitter, capped at
        ``max_backoff``.
        """
        if retry_after and self.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        base = self.backoff_factor ** attempt
        spread = base * self.jitter
        return min(base + random.uniform(-spread, spread), self.max_backoff)


def error_from_response(response: httpx.Response) -> MergeMeError:
    """
    Build the exception matching an HTTP error response.

    Args:
        response: Response with a status of 400 or above

    Returns:
        MergeMeError subclass carrying GitHub's message and request id
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    status = response.status_code
    code = f"HTTP_{status}"
    message = body.get("message", f"HTTP {status}")
    request_id = response.headers.get("X-GitHub-Request-Id")

    if status == 429:
        try:
            retry_after = int(response.headers.get("Retry-After", _DEFAULT_RETRY_AFTER))
        except ValueError:
            retry_after = _DEFAULT_RETRY_AFTER
        return RateLimitedError(code, message, retry_after, request_id)
    if status >= 500:
        return ServerError(code, message, request_id)

    error_class = _STATUS_ERRORS.get(status, ValidationError)
    return error_class(code, message, request_id)


def data_from_payload(
    body: dict[str, Any], request_id: str | None = None
) -> dict[str, Any]:
    """Return the ``data`` object of a GraphQL payload, raising on ``errors``."""
    errors = body.get("errors")
    if errors:
        raise GraphQLError(errors, request_id)

    data = body.get("data")
    if data is None:
        raise ServerError("NO_DATA", "GraphQL response contained no data", request_id)
    return data


class AsyncGraphQLTransport:
    """
    Async GraphQL client for the GitHub API.

    Only HTTP-level failures are retried here. A 200 response carrying an
    ``errors`` array raises ``GraphQLError`` straight away; callers decide
    whether that error deserves another attempt.
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    GRAPHQL_PATH = "/graphql"

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Args:
            token: GitHub token sent as a bearer credential
            base_url: API root, e.g. "https://api.github.com"
            timeout: Per-request timeout in seconds
            retry_config: HTTP retry policy (default: RetryConfig())
        """
        self.base_url = base_url.rstrip("/")
        self.url = f"{self.base_url}{self.GRAPHQL_PATH}"
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "Content-Type": "application/json",
            },
        )

    async def __aenter__(self) -> "AsyncGraphQLTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: GraphQL document
            variables: Variables for the document

        Returns:
            The ``data`` object of the response

        Raises:
            GraphQLError: If the response carries GraphQL errors
            MergeMeError: On HTTP errors, or once retries run out
        """
        payload = {"query": query, "variables": variables or {}}
        config = self.retry_config
        attempt = 0

        while True:
            log_graphql_request(self.url, query, variables)
            started = time.monotonic()
            try:
                response = await self._client.post(self.GRAPHQL_PATH, json=payload)
            except httpx.RequestError as e:
                if not config.allows(attempt):
                    raise ServerError("CONNECTION_ERROR", str(e)) from e
                await asyncio.sleep(config.backoff(attempt))
                attempt += 1
                continue

            elapsed_ms = (time.monotonic() - started) * 1000

            if response.status_code < 400:
                request_id = response.headers.get("X-GitHub-Request-Id")
                try:
                    body = response.json()
                except ValueError as e:
                    log_graphql_response(response.status_code, self.url, None, elapsed_ms)
                    raise ServerError(
                        "INVALID_JSON", f"Response body is not JSON: {e}", request_id
                    ) from e
                if not isinstance(body, dict):
                    raise ServerError(
                        "INVALID_JSON",
                        f"Expected a JSON object, got {type(body).__name__}",
                        request_id,
                    )
                log_graphql_response(response.status_code, self.url, body, elapsed_ms)
                return data_from_payload(body, request_id)

            log_graphql_response(response.status_code, self.url, None, elapsed_ms)
            if not config.should_retry(response.status_code, attempt):
                raise error_from_response(response)

            await asyncio.sleep(config.backoff(attempt, response.headers.get("Retry-After")))
            attempt += 1
