"""Query executor protocol consumed by the merge engine."""

from typing import Any, Protocol


class QueryExecutor(Protocol):
    """Anything able to run a GraphQL document and return its ``data``."""

    async def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        ...
