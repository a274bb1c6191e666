"""
mergeme GitHub client.

Bundles the GraphQL transport with the resource clients built on it.
"""

import os
from collections.abc import Mapping
from typing import Any

from mergeme.clients import PullsClient
from mergeme.config import Settings
from mergeme.transport import AsyncGraphQLTransport, RetryConfig


class MergeMeClient:
    """
    Async entry point to the GitHub GraphQL API.

    Example:
        ```python
        async with MergeMeClient.from_env() as client:
            snapshot = await client.pulls.get_snapshot("octo-org", "octo-repo", 42)
            outcome = await try_merge(client.transport, 3, snapshot)
        ```
    """

    def __init__(
        self,
        token: str,
        base_url: str = AsyncGraphQLTransport.DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Args:
            token: GitHub token (usually the workflow's GITHUB_TOKEN)
            base_url: API root; GitHub Enterprise servers use their own
            timeout: Per-request timeout in seconds
            retry_config: HTTP retry policy for the transport
        """
        self._transport = AsyncGraphQLTransport(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )
        self.pulls = PullsClient(self._transport)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> "MergeMeClient":
        """
        Create a client from the workflow environment.

        Reads the token from the ``github_token`` input and the API root from
        ``GITHUB_API_URL`` (set by the Actions runner). Extra keyword
        arguments go to the constructor.

        Raises:
            ConfigurationError: If the token input is missing
        """
        env = os.environ if environ is None else environ
        return cls.from_settings(Settings.from_env(env), env, **kwargs)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        environ: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> "MergeMeClient":
        """
        Create a client from already resolved settings.

        Only ``GITHUB_API_URL`` is read from the environment.

        Raises:
            ConfigurationError: If the settings carry no token
        """
        env = os.environ if environ is None else environ
        base_url = env.get("GITHUB_API_URL") or AsyncGraphQLTransport.DEFAULT_BASE_URL
        return cls(token=settings.require_token(), base_url=base_url, **kwargs)

    @property
    def transport(self) -> AsyncGraphQLTransport:
        """The transport; pass it wherever a QueryExecutor is expected."""
        return self._transport

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "MergeMeClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
